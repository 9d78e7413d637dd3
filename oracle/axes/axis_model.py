"""
Axis Model for the Daily Energy Engine.

Defines AxisVector, the four-axis summary of a day's behavioral tone:
- action: drive to initiate
- tempo: pace of events
- strategy: planning versus improvisation
- visibility: public versus private expression

Each axis is semantically bounded to [1, 10] once normalized.
"""

from dataclasses import dataclass
from typing import Dict, Iterable

import numpy as np

AXIS_NAMES = ("action", "tempo", "strategy", "visibility")

AXIS_MIN: float = 1.0
AXIS_MAX: float = 10.0


@dataclass(frozen=True)
class AxisVector:
    """
    Immutable four-axis vector.

    Created fresh for every derivation cycle and never persisted.
    """
    action: float
    tempo: float
    strategy: float
    visibility: float

    @property
    def kinetic(self) -> float:
        """Average of action and tempo."""
        return (self.action + self.tempo) / 2.0

    def as_array(self) -> np.ndarray:
        return np.array([self.action, self.tempo, self.strategy, self.visibility], dtype=float)

    @classmethod
    def from_array(cls, values: Iterable[float]) -> "AxisVector":
        action, tempo, strategy, visibility = (float(v) for v in values)
        return cls(action=action, tempo=tempo, strategy=strategy, visibility=visibility)

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "AxisVector":
        return cls(**{name: float(data[name]) for name in AXIS_NAMES})

    def clamped(self, lo: float = AXIS_MIN, hi: float = AXIS_MAX) -> "AxisVector":
        return AxisVector.from_array(np.clip(self.as_array(), lo, hi))

    def to_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in AXIS_NAMES}

    def isclose(self, other: "AxisVector", tol: float = 1e-9) -> bool:
        return bool(np.allclose(self.as_array(), other.as_array(), atol=tol, rtol=0.0))

    def __str__(self) -> str:
        return f"A:{self.action:.1f} T:{self.tempo:.1f} S:{self.strategy:.1f} V:{self.visibility:.1f}"


NEUTRAL_AXES = AxisVector(action=5.5, tempo=5.5, strategy=5.5, visibility=5.5)
