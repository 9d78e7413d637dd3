"""
Token merging for the Daily Energy Engine.

Collapses tokens sharing a name into a single entry whose weight is the
sum of the duplicates, then soft-caps large weights so that no single
label dominates downstream scoring.
"""

import logging
import math
from typing import Dict, List, Sequence

from oracle.tokens.provenance import OriginKind
from oracle.tokens.semantic_token import SemanticToken

logger = logging.getLogger(__name__)

PER_LABEL_SOFT_CAP: float = 3.0


def soft_cap(weight: float, cap: float = PER_LABEL_SOFT_CAP) -> float:
    """Compress weights above cap with sqrt(weight * cap); ranking is preserved."""
    if weight <= cap:
        return weight
    return math.sqrt(weight * cap)


def merge_tokens(tokens: Sequence[SemanticToken]) -> List[SemanticToken]:
    """
    Merge duplicate tokens by case-insensitive name.

    The merged token keeps the provenance of the first axis-origin
    duplicate when one exists, otherwise of the first duplicate seen.
    Output preserves first-seen order.

    Args:
        tokens: Raw token pool

    Returns:
        Token pool with unique names and soft-capped weights
    """
    groups: Dict[str, List[SemanticToken]] = {}
    for token in tokens:
        groups.setdefault(token.key, []).append(token)

    merged: List[SemanticToken] = []
    for name, duplicates in groups.items():
        preferred = next(
            (t for t in duplicates if t.origin == OriginKind.AXIS),
            duplicates[0],
        )
        combined = sum(t.weight for t in duplicates)
        capped = soft_cap(combined)

        if len(duplicates) > 1:
            logger.debug(f"[TOKENS] Merged {len(duplicates)} tokens named '{name}' -> weight {combined:.2f}")
        if capped != combined:
            logger.debug(f"[TOKENS] Soft-capped '{name}': {combined:.2f} -> {capped:.2f}")

        merged.append(preferred.with_weight(capped))

    return merged
