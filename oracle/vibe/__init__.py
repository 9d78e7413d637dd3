from oracle.vibe.breakdown import DEFAULT_BREAKDOWN, ENERGIES, TOTAL_POINTS, VibeBreakdown
from oracle.vibe.distributor import VibeDistributor, apportion, distribute, raw_scores

__all__ = [
    "DEFAULT_BREAKDOWN",
    "ENERGIES",
    "TOTAL_POINTS",
    "VibeBreakdown",
    "VibeDistributor",
    "apportion",
    "distribute",
    "raw_scores",
]
