"""
Vibe Breakdown model for the Daily Energy Engine.

Six style energies share a fixed budget of 21 points per day:
- classic: structured, grounded, refined, timeless
- playful: bright, dynamic, expressive, fun
- romantic: flowing, soft, harmonious, dreamy
- utility: practical, functional, protective
- drama: bold, intense, powerful, striking
- edge: unconventional, innovative, electric
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

ENERGIES: Tuple[str, ...] = ("classic", "playful", "romantic", "utility", "drama", "edge")

TOTAL_POINTS: int = 21
MAX_ENERGY_POINTS: int = 10


@dataclass(frozen=True)
class VibeBreakdown:
    """
    Immutable six-way energy distribution.

    Invariant: every field in [0, MAX_ENERGY_POINTS] and the fields sum to
    exactly TOTAL_POINTS.
    """
    classic: int
    playful: int
    romantic: int
    utility: int
    drama: int
    edge: int

    def __post_init__(self):
        for energy in ENERGIES:
            value = getattr(self, energy)
            if not 0 <= value <= MAX_ENERGY_POINTS:
                raise ValueError(f"{energy}={value} outside [0, {MAX_ENERGY_POINTS}]")
        if self.total != TOTAL_POINTS:
            raise ValueError(f"Vibe breakdown totals {self.total}, expected {TOTAL_POINTS}")

    @property
    def total(self) -> int:
        return sum(getattr(self, energy) for energy in ENERGIES)

    @property
    def is_valid(self) -> bool:
        return self.total == TOTAL_POINTS

    def points(self, energy: str) -> int:
        energy = energy.lower()
        if energy not in ENERGIES:
            return 0
        return getattr(self, energy)

    def ranked(self) -> List[Tuple[str, int]]:
        """Energies by points, highest first; ties keep canonical order."""
        return sorted(self.as_dict().items(), key=lambda item: -item[1])

    @property
    def dominant_energy(self) -> str:
        return self.ranked()[0][0]

    @property
    def secondary_energy(self) -> str:
        return self.ranked()[1][0]

    def as_dict(self) -> Dict[str, int]:
        return {energy: getattr(self, energy) for energy in ENERGIES}

    @classmethod
    def from_mapping(cls, data: Mapping[str, int]) -> "VibeBreakdown":
        return cls(**{energy: int(data.get(energy, 0)) for energy in ENERGIES})

    def __str__(self) -> str:
        parts = ", ".join(f"{energy.title()}: {points}" for energy, points in self.as_dict().items())
        return f"{parts} [Total: {self.total}]"


DEFAULT_BREAKDOWN = VibeBreakdown(classic=4, playful=3, romantic=4, utility=4, drama=3, edge=3)
