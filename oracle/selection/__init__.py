from oracle.selection.card_selector import CardSelector, SelectionResult, SelectionStatus
from oracle.selection.monitor import MonitorReport, SelectionMonitor
from oracle.selection.scoring import ScoreBreakdown

__all__ = [
    "CardSelector",
    "MonitorReport",
    "ScoreBreakdown",
    "SelectionMonitor",
    "SelectionResult",
    "SelectionStatus",
]
