from oracle.tokens.merger import merge_tokens, soft_cap
from oracle.tokens.provenance import AspectKind, Element, OriginKind, Planet, Sign
from oracle.tokens.semantic_token import SemanticToken

__all__ = [
    "AspectKind",
    "Element",
    "OriginKind",
    "Planet",
    "SemanticToken",
    "Sign",
    "merge_tokens",
    "soft_cap",
]
