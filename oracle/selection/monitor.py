"""
Selection Monitor for the Daily Energy Engine.

Diagnostic logging after a committed selection: score breakdown of the top
candidates, arcana diversity, score spread and recent variety per profile.
Purely observational; never changes a selection.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

from oracle.axes.axis_model import AxisVector
from oracle.selection.scoring import ScoreBreakdown
from oracle.state.recency_store import RecencyStore
from oracle.vibe.breakdown import VibeBreakdown

logger = logging.getLogger(__name__)

TOP_N_LOGGED = 5
DIVERSITY_WINDOW = 10
VARIETY_WINDOW = 7
LOW_VARIETY_THRESHOLD = 5


@dataclass(frozen=True)
class MonitorReport:
    arcana_variety: int
    score_spread: Optional[float]
    recent_unique: Optional[int]
    recent_count: int
    low_variety: bool


class SelectionMonitor:
    """Logs selection patterns for variety analysis."""

    def __init__(self, recency: Optional[RecencyStore] = None):
        self.recency = recency

    def observe(
        self,
        ranked: Sequence[ScoreBreakdown],
        axes: AxisVector,
        vibe: VibeBreakdown,
        profile: Optional[str] = None,
        day: Optional[date] = None,
    ) -> MonitorReport:
        """
        Log diagnostics for one selection.

        Args:
            ranked: Candidates sorted by total score, winner first
            axes: Day's axes
            vibe: Day's vibe breakdown
            profile: Profile the selection was committed for
            day: Reference day

        Returns:
            MonitorReport with the computed metrics
        """
        logger.info(f"[MONITOR] Axes {axes} | Vibe {vibe}")
        for rank, entry in enumerate(ranked[:TOP_N_LOGGED], start=1):
            logger.info(
                f"[MONITOR] #{rank} {entry.card.name}: {entry.total:.1f} "
                f"(A:{entry.axis_score:.1f} V:{entry.vibe_score:.1f} "
                f"B:{entry.suit_boost:.1f} R:-{entry.recency_penalty:.0f} J:{entry.jitter:+.3f})"
            )

        arcana_variety = len({entry.card.arcana for entry in ranked[:DIVERSITY_WINDOW]})
        logger.info(
            f"[MONITOR] Selection diversity: {arcana_variety} arcana types "
            f"in top {min(DIVERSITY_WINDOW, len(ranked))}"
        )

        score_spread = None
        if len(ranked) > 1:
            score_spread = ranked[0].total - ranked[min(TOP_N_LOGGED, len(ranked)) - 1].total
            logger.info(f"[MONITOR] Score spread: {score_spread:.1f} points")

        recent_names: List[str] = []
        if self.recency is not None and profile:
            recent_names = [name for name, _ in self.recency.recent_selections(profile, day)][:VARIETY_WINDOW]

        recent_unique = None
        low_variety = False
        if recent_names:
            recent_unique = len({name.lower() for name in recent_names})
            logger.info(
                f"[MONITOR] Recent selection pattern for {profile}: "
                f"{recent_unique}/{len(recent_names)} unique cards"
            )
            if len(recent_names) >= LOW_VARIETY_THRESHOLD and recent_unique < LOW_VARIETY_THRESHOLD:
                low_variety = True
                logger.warning(
                    f"[MONITOR] Low variety for {profile}: only {recent_unique} unique cards "
                    f"in last {len(recent_names)} draws"
                )

        return MonitorReport(
            arcana_variety=arcana_variety,
            score_spread=score_spread,
            recent_unique=recent_unique,
            recent_count=len(recent_names),
            low_variety=low_variety,
        )
