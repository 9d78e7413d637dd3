"""
Card model for the Daily Energy Engine.

A Card is one record of the static 78-card catalog. Cards are immutable
and shared read-only across requests once the catalog has loaded.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from oracle.axes.axis_model import AXIS_NAMES, AxisVector
from oracle.errors import CatalogDecodeError
from oracle.vibe.breakdown import ENERGIES

# Axis affinities are stored on a 0-100 scale
AXIS_AFFINITY_MAX: float = 100.0
AXIS_AFFINITY_DEFAULT: float = 50.0

COURT_NUMBERS = range(11, 15)  # Page, Knight, Queen, King


class Arcana(enum.Enum):
    MAJOR = "major"
    MINOR = "minor"


class Suit(enum.Enum):
    CUPS = "cups"
    WANDS = "wands"
    SWORDS = "swords"
    PENTACLES = "pentacles"


def rescale_axis(value: float) -> float:
    """Map a 0-100 affinity onto the 1-10 axis scale."""
    return 1.0 + value * 9.0 / AXIS_AFFINITY_MAX


@dataclass(frozen=True)
class Card:
    """
    Immutable catalog card.

    number is 1-14 for minors (11=Page, 12=Knight, 13=Queen, 14=King)
    and 0-21 for majors.
    """
    name: str
    arcana: Arcana
    suit: Optional[Suit] = None
    number: Optional[int] = None
    keywords: Tuple[str, ...] = ()
    themes: Tuple[str, ...] = ()
    energy_affinity: Mapping[str, float] = field(default_factory=dict)
    axes_affinity: Optional[Mapping[str, float]] = None
    description: str = ""
    reversed_keywords: Tuple[str, ...] = ()
    symbolism: Tuple[str, ...] = ()

    @property
    def is_major(self) -> bool:
        return self.arcana is Arcana.MAJOR

    @property
    def is_court(self) -> bool:
        return self.arcana is Arcana.MINOR and self.number in COURT_NUMBERS

    @property
    def dominant_energy(self) -> Optional[str]:
        """Energy with the highest affinity; ties resolve in canonical energy order."""
        if not self.energy_affinity:
            return None
        return max(ENERGIES, key=lambda e: self.energy_affinity.get(e, 0.0))

    def affinity(self, energy: str) -> float:
        return float(self.energy_affinity.get(energy.lower(), 0.0))

    def axis_affinity(self, axis: str) -> float:
        """Raw 0-100 affinity for one axis; missing axes read as 50."""
        if not self.axes_affinity:
            return AXIS_AFFINITY_DEFAULT
        return float(self.axes_affinity.get(axis, AXIS_AFFINITY_DEFAULT))

    def axis_vector(self) -> AxisVector:
        """Card axis profile rescaled to the 1-10 axis scale."""
        return AxisVector(**{axis: rescale_axis(self.axis_affinity(axis)) for axis in AXIS_NAMES})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], index: Optional[int] = None) -> "Card":
        """
        Decode one catalog record.

        Accepts snake_case keys and the camelCase energyAffinity/axesAffinity
        spellings. Enum values are matched case-insensitively.

        Raises:
            CatalogDecodeError: If the record is malformed
        """
        if not isinstance(data, Mapping):
            raise CatalogDecodeError(f"expected object, got {type(data).__name__}", index)

        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise CatalogDecodeError("missing card name", index)

        try:
            arcana = Arcana(str(data.get("arcana", "")).lower())
        except ValueError:
            raise CatalogDecodeError(f"{name}: unknown arcana {data.get('arcana')!r}", index)

        suit = None
        raw_suit = data.get("suit")
        if raw_suit:
            try:
                suit = Suit(str(raw_suit).lower())
            except ValueError:
                raise CatalogDecodeError(f"{name}: unknown suit {raw_suit!r}", index)

        number = data.get("number")
        if number is not None and (isinstance(number, bool) or not isinstance(number, int)):
            raise CatalogDecodeError(f"{name}: number must be an integer", index)

        energy_affinity = _float_map(
            data.get("energy_affinity", data.get("energyAffinity")) or {}, name, "energy_affinity", index
        )
        raw_axes = data.get("axes_affinity", data.get("axesAffinity"))
        axes_affinity = _float_map(raw_axes, name, "axes_affinity", index) if raw_axes else None

        return cls(
            name=name.strip(),
            arcana=arcana,
            suit=suit,
            number=number,
            keywords=_str_tuple(data.get("keywords"), name, "keywords", index),
            themes=_str_tuple(data.get("themes"), name, "themes", index),
            energy_affinity={k.lower(): v for k, v in energy_affinity.items()},
            axes_affinity=axes_affinity,
            description=str(data.get("description") or ""),
            reversed_keywords=_str_tuple(
                data.get("reversed_keywords", data.get("reversedKeywords")), name, "reversed_keywords", index
            ),
            symbolism=_str_tuple(data.get("symbolism"), name, "symbolism", index),
        )

    def __str__(self) -> str:
        return self.name


def _str_tuple(value: Any, name: str, field_name: str, index: Optional[int]) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise CatalogDecodeError(f"{name}: {field_name} must be a list of strings", index)
    return tuple(value)


def _float_map(value: Any, name: str, field_name: str, index: Optional[int]) -> Dict[str, float]:
    if not isinstance(value, Mapping):
        raise CatalogDecodeError(f"{name}: {field_name} must be an object", index)
    result = {}
    for key, raw in value.items():
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise CatalogDecodeError(f"{name}: {field_name}[{key!r}] must be a number", index)
        result[str(key)] = float(raw)
    return result
