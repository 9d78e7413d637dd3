from oracle.deck.card import Arcana, Card, Suit, rescale_axis
from oracle.deck.catalog import DeckCatalog, parse_catalog
from oracle.deck.validator import validate_catalog

__all__ = [
    "Arcana",
    "Card",
    "DeckCatalog",
    "Suit",
    "parse_catalog",
    "rescale_axis",
    "validate_catalog",
]
