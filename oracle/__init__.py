"""
Daily Energy Derivation & Card Selection Engine.

Turns a day's weighted semantic tokens and axis inputs into a balanced
four-axis energy profile, a 21-point vibe breakdown and one card drawn from
a 78-card catalog, with per-profile memory to avoid near-term repeats.
"""

from oracle.axes.axis_model import AxisVector
from oracle.config import OracleConfig
from oracle.deck.card import Card
from oracle.deck.catalog import DeckCatalog
from oracle.engine.daily_energy import DailyEnergyEngine, DailyReading
from oracle.errors import CatalogDecodeError, DeckUnavailableError, OracleError
from oracle.selection.card_selector import CardSelector, SelectionResult, SelectionStatus
from oracle.state.recency_store import RecencyStore
from oracle.tokens.semantic_token import SemanticToken
from oracle.vibe.breakdown import VibeBreakdown

__version__ = "0.1.0"

__all__ = [
    "AxisVector",
    "Card",
    "CardSelector",
    "CatalogDecodeError",
    "DailyEnergyEngine",
    "DailyReading",
    "DeckCatalog",
    "DeckUnavailableError",
    "OracleConfig",
    "OracleError",
    "RecencyStore",
    "SelectionResult",
    "SelectionStatus",
    "SemanticToken",
    "VibeBreakdown",
]
