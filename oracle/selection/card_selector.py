"""
Card Selector for the Daily Energy Engine.

Chooses one card per (profile, day) from the catalog.

Selection pipeline:
1. Deck readiness (missing or empty catalog yields NO_DECK, never raises)
2. Stage 1 axis filter against a kinetic-dependent similarity floor
3. Stage 2 scoring: axis similarity, vibe alignment, suit boost, recency penalty
4. Seeded jitter
5. Tie-break among near-equal candidates
6. Optional commit to the recency store plus monitor logging

With commit disabled, identical inputs and recency state always give the
same result.
"""

import enum
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from oracle.axes.axis_model import NEUTRAL_AXES, AxisVector
from oracle.deck.card import Card
from oracle.deck.catalog import DeckCatalog
from oracle.errors import DeckUnavailableError
from oracle.selection.monitor import SelectionMonitor
from oracle.selection.scoring import (
    AXIS_TIE_EPSILON,
    TIE_EPSILON,
    VIBE_WEIGHT,
    ScoreBreakdown,
    axis_similarity,
    jitter,
    recency_penalty,
    score_card,
    similarity_floor,
    vibe_alignment,
)
from oracle.state.recency_store import DayLike, RecencyStore, as_day
from oracle.vibe.breakdown import VibeBreakdown

logger = logging.getLogger(__name__)


class SelectionStatus(enum.Enum):
    SELECTED = "selected"
    FALLBACK_VIBE_ONLY = "fallback_vibe_only"
    NO_DECK = "no_deck"


@dataclass
class SelectionResult:
    """
    Outcome of one selection.

    card is None only when status is NO_DECK. candidates holds every scored
    card, best first.
    """
    card: Optional[Card]
    status: SelectionStatus
    candidates: List[ScoreBreakdown] = field(default_factory=list)
    floor: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.card is not None

    @property
    def winner(self) -> Optional[ScoreBreakdown]:
        if self.card is None:
            return None
        for entry in self.candidates:
            if entry.card is self.card:
                return entry
        return None

    def top(self, n: int = 5) -> List[ScoreBreakdown]:
        return self.candidates[:n]


class CardSelector:
    """
    Two-stage card selector.

    The catalog and recency store are injected; both may be shared across
    threads. The selector keeps no per-call state.
    """

    def __init__(
        self,
        catalog: DeckCatalog,
        recency: Optional[RecencyStore] = None,
        monitor: Optional[SelectionMonitor] = None,
    ):
        self.catalog = catalog
        self.recency = recency
        self.monitor = monitor if monitor is not None else SelectionMonitor(recency)

    def _load_cards(self) -> Optional[Tuple[Card, ...]]:
        try:
            cards = self.catalog.load()
        except DeckUnavailableError as e:
            logger.error(f"[SELECT] Deck unavailable: {e}")
            return None
        if not cards:
            logger.error("[SELECT] Deck is empty")
            return None
        return cards

    def _history(self, profile: Optional[str], day: date) -> Dict[str, int]:
        """Lowercased card name -> days since last drawn, for the window."""
        if not profile or self.recency is None:
            return {}
        history: Dict[str, int] = {}
        for name, days_ago in self.recency.recent_selections(profile, day):
            history.setdefault(name.lower(), days_ago)
        return history

    def select(
        self,
        axes: AxisVector,
        vibe: VibeBreakdown,
        profile: Optional[str] = None,
        day: DayLike = None,
        seed: Optional[int] = None,
        commit: bool = False,
    ) -> SelectionResult:
        """
        Select the day's card.

        Args:
            axes: Balanced axis vector for the day
            vibe: Day's vibe breakdown
            profile: Profile id; enables recency penalties and commit
            day: Reference day (defaults to today)
            seed: Daily seed for jitter and tie-break
            commit: Record the winner for (profile, day)

        Returns:
            SelectionResult; status NO_DECK when the catalog is unusable
        """
        cards = self._load_cards()
        if cards is None:
            return SelectionResult(card=None, status=SelectionStatus.NO_DECK)

        ref_day = as_day(day)
        history = self._history(profile, ref_day)

        floor = similarity_floor(axes)
        survivors = [card for card in cards if axis_similarity(card, axes) >= floor]
        logger.debug(
            f"[SELECT] Stage 1: {len(survivors)}/{len(cards)} cards pass floor {floor:.2f} "
            f"(kinetic {axes.kinetic:.2f})"
        )

        if survivors:
            status = SelectionStatus.SELECTED
            scored = [score_card(card, axes, vibe, history.get(card.name.lower())) for card in survivors]
        else:
            logger.info(f"[SELECT] No card passes floor {floor:.2f}, falling back to vibe-only scoring")
            status = SelectionStatus.FALLBACK_VIBE_ONLY
            scored = [
                score_card(card, axes, vibe, history.get(card.name.lower()), use_axes=False)
                for card in cards
            ]

        if seed is not None:
            for entry in scored:
                entry.jitter = jitter(entry.card, axes, seed)

        ranked = sorted(scored, key=lambda entry: -entry.total)
        winner = self._tie_break(ranked, seed)

        logger.info(
            f"[SELECT] {winner.card.name} ({status.value}) total={winner.total:.2f} "
            f"sim={winner.axis_similarity:.3f} for profile={profile or '-'} day={ref_day.isoformat()}"
        )

        result = SelectionResult(card=winner.card, status=status, candidates=ranked, floor=floor)
        self._commit(result, axes, vibe, profile, ref_day, commit)
        return result

    def select_by_vibe(
        self,
        vibe: VibeBreakdown,
        profile: Optional[str] = None,
        day: DayLike = None,
        seed: Optional[int] = None,
        commit: bool = False,
    ) -> SelectionResult:
        """
        Axis-free fallback: rank the whole catalog by vibe alignment minus
        recency penalty.
        """
        cards = self._load_cards()
        if cards is None:
            return SelectionResult(card=None, status=SelectionStatus.NO_DECK)

        ref_day = as_day(day)
        history = self._history(profile, ref_day)

        scored = [
            ScoreBreakdown(
                card=card,
                axis_similarity=0.0,
                axis_score=0.0,
                vibe_score=vibe_alignment(card, vibe) * VIBE_WEIGHT,
                suit_boost=0.0,
                recency_penalty=recency_penalty(history.get(card.name.lower())),
            )
            for card in cards
        ]
        ranked = sorted(scored, key=lambda entry: -entry.total)
        winner = self._tie_break(ranked, seed)

        logger.info(f"[SELECT] {winner.card.name} (vibe only) total={winner.total:.2f}")

        result = SelectionResult(card=winner.card, status=SelectionStatus.FALLBACK_VIBE_ONLY, candidates=ranked)
        self._commit(result, NEUTRAL_AXES, vibe, profile, ref_day, commit)
        return result

    def _tie_break(self, ranked: Sequence[ScoreBreakdown], seed: Optional[int]) -> ScoreBreakdown:
        """
        Resolve near-ties among the top candidates.

        Candidates within TIE_EPSILON of the best score are narrowed to those
        within AXIS_TIE_EPSILON of their best axis similarity. A seed then
        picks one by index; without a seed the highest similarity wins.
        """
        best_total = ranked[0].total
        contenders = [entry for entry in ranked if best_total - entry.total <= TIE_EPSILON]
        if len(contenders) == 1:
            return contenders[0]

        best_similarity = max(entry.axis_similarity for entry in contenders)
        contenders = [
            entry for entry in contenders
            if best_similarity - entry.axis_similarity <= AXIS_TIE_EPSILON
        ]
        if len(contenders) == 1:
            return contenders[0]

        if seed is not None:
            pick = contenders[seed % len(contenders)]
            logger.debug(f"[SELECT] Seeded tie-break over {len(contenders)} candidates -> {pick.card.name}")
            return pick

        # max() keeps the first of equal similarities, so rank order decides
        return max(contenders, key=lambda entry: entry.axis_similarity)

    def _commit(
        self,
        result: SelectionResult,
        axes: AxisVector,
        vibe: VibeBreakdown,
        profile: Optional[str],
        day: date,
        commit: bool,
    ) -> None:
        if not commit or not profile or result.card is None:
            return
        if self.recency is not None:
            self.recency.record(profile, result.card.name, day)
        self.monitor.observe(result.candidates, axes, vibe, profile, day)
