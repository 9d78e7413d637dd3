"""
Daily Energy Engine.

Wires the full derivation cycle for one (profile, day):

    merge tokens -> modulate axes -> distribute vibe -> purge expired
    recency -> select card -> commit

Every step except the commit is a pure function of its inputs, so a
reading can be previewed without side effects by passing commit=False.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from oracle.axes.axis_model import NEUTRAL_AXES, AxisVector
from oracle.axes.balancer import add_daily_volatility
from oracle.axes.volatility import modulate
from oracle.config import OracleConfig
from oracle.deck.catalog import DeckCatalog
from oracle.engine.seed import daily_seed
from oracle.selection.card_selector import CardSelector, SelectionResult
from oracle.state.recency_backend import JsonFileRecencyBackend
from oracle.state.recency_store import DayLike, RecencyStore, as_day
from oracle.tokens.merger import merge_tokens
from oracle.tokens.semantic_token import SemanticToken
from oracle.vibe.breakdown import VibeBreakdown
from oracle.vibe.distributor import VibeDistributor

logger = logging.getLogger(__name__)

TokenLike = Union[SemanticToken, Mapping[str, Any]]


@dataclass(frozen=True)
class DailyReading:
    """Everything derived for one profile on one day."""
    profile: str
    day: date
    seed: int
    axes: AxisVector
    vibe: VibeBreakdown
    selection: SelectionResult

    def to_dict(self) -> Dict[str, Any]:
        card = self.selection.card
        return {
            "profile": self.profile,
            "day": self.day.isoformat(),
            "seed": self.seed,
            "axes": {name: round(value, 3) for name, value in self.axes.to_dict().items()},
            "vibe": self.vibe.as_dict(),
            "status": self.selection.status.value,
            "card": card.name if card else None,
            "description": card.description if card else None,
            "top_candidates": [entry.to_dict() for entry in self.selection.top(5)],
        }


def _coerce_tokens(tokens: Sequence[TokenLike]) -> list:
    return [t if isinstance(t, SemanticToken) else SemanticToken.from_dict(t) for t in tokens]


class DailyEnergyEngine:
    """
    Derives daily readings.

    Collaborators are injected so tests can substitute a fake catalog or an
    in-memory recency store.
    """

    def __init__(
        self,
        catalog: DeckCatalog,
        recency: Optional[RecencyStore] = None,
        distributor: Optional[VibeDistributor] = None,
        commit_selections: bool = True,
        daily_volatility: bool = False,
    ):
        """
        Initialize engine.

        Args:
            catalog: Card catalog
            recency: Recency store (None disables history)
            distributor: Vibe distributor
            commit_selections: Default for derive(commit=None)
            daily_volatility: Add seeded per-axis offsets after modulation
        """
        self.catalog = catalog
        self.recency = recency
        self.distributor = distributor or VibeDistributor()
        self.selector = CardSelector(catalog, recency)
        self.commit_selections = commit_selections
        self.daily_volatility = daily_volatility

    @classmethod
    def from_config(cls, config: OracleConfig) -> "DailyEnergyEngine":
        """Build an engine backed by the configured deck and JSON recency file."""
        recency = RecencyStore(
            JsonFileRecencyBackend(config.recency_path),
            retry_schedule_ms=config.store_retry_ms,
        )
        return cls(
            catalog=DeckCatalog(config.deck_path),
            recency=recency,
            commit_selections=config.commit_selections,
        )

    def derive(
        self,
        profile: str,
        tokens: Sequence[TokenLike] = (),
        base_axes: Optional[AxisVector] = None,
        transit_count: int = 0,
        lunar_phase: float = 0.5,
        day: DayLike = None,
        seed: Optional[int] = None,
        commit: Optional[bool] = None,
    ) -> DailyReading:
        """
        Run one derivation cycle.

        Args:
            profile: Profile id
            tokens: Token pool (SemanticToken or loose dicts)
            base_axes: Precomputed base axes (neutral when omitted)
            transit_count: Active transits today
            lunar_phase: Lunar phase fraction in [0, 1]
            day: Reference day (defaults to today)
            seed: Daily seed (derived from profile and day when omitted)
            commit: Record the selection; None uses the engine default

        Returns:
            DailyReading

        Raises:
            ValueError: If a token dict is malformed
        """
        ref_day = as_day(day)
        if seed is None:
            seed = daily_seed(profile, ref_day)
        if commit is None:
            commit = self.commit_selections

        merged = merge_tokens(_coerce_tokens(tokens))
        axes = modulate(base_axes or NEUTRAL_AXES, merged, transit_count, lunar_phase, seed)
        if self.daily_volatility:
            axes = add_daily_volatility(axes, seed)
        vibe = self.distributor.distribute(merged)

        logger.info(f"[ENGINE] {profile} {ref_day.isoformat()} seed={seed} axes=({axes}) vibe=({vibe})")

        if self.recency is not None and commit:
            self.recency.purge_expired(profile, ref_day)

        selection = self.selector.select(axes, vibe, profile=profile, day=ref_day, seed=seed, commit=commit)
        if not selection.ok:
            logger.warning(f"[ENGINE] No card for {profile} on {ref_day.isoformat()}: {selection.status.value}")

        return DailyReading(profile=profile, day=ref_day, seed=seed, axes=axes, vibe=vibe, selection=selection)
