"""
Token Provenance for the Daily Energy Engine.

Closed enumerations describing where a semantic token came from: the
planet that produced it, the sign it was placed in, the aspect that
linked it, and the kind of upstream feature extraction that emitted it.

Parsing is strict: an unknown name raises ValueError instead of silently
producing a token with no provenance.
"""

from enum import Enum
from typing import Optional, Type, TypeVar

E = TypeVar("E", bound=Enum)


class Element(Enum):
    """Classical element of a zodiac sign."""
    FIRE = "fire"
    EARTH = "earth"
    AIR = "air"
    WATER = "water"


class Planet(Enum):
    """Planetary (or chart point) source of a token."""
    SUN = "Sun"
    MOON = "Moon"
    MERCURY = "Mercury"
    VENUS = "Venus"
    MARS = "Mars"
    JUPITER = "Jupiter"
    SATURN = "Saturn"
    URANUS = "Uranus"
    NEPTUNE = "Neptune"
    PLUTO = "Pluto"
    CHIRON = "Chiron"
    NORTH_NODE = "North Node"
    ASCENDANT = "Ascendant"
    MIDHEAVEN = "Midheaven"
    DERIVED_AXES = "DerivedAxes"  # synthetic source for axis-generated tokens


class Sign(Enum):
    """Zodiac sign source of a token."""
    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"

    @property
    def element(self) -> Element:
        return _SIGN_ELEMENTS[self]


_SIGN_ELEMENTS = {
    Sign.ARIES: Element.FIRE,
    Sign.LEO: Element.FIRE,
    Sign.SAGITTARIUS: Element.FIRE,
    Sign.TAURUS: Element.EARTH,
    Sign.VIRGO: Element.EARTH,
    Sign.CAPRICORN: Element.EARTH,
    Sign.GEMINI: Element.AIR,
    Sign.LIBRA: Element.AIR,
    Sign.AQUARIUS: Element.AIR,
    Sign.CANCER: Element.WATER,
    Sign.SCORPIO: Element.WATER,
    Sign.PISCES: Element.WATER,
}


class AspectKind(Enum):
    """Aspect linking two chart points."""
    CONJUNCTION = "conjunction"
    OPPOSITION = "opposition"
    TRINE = "trine"
    SQUARE = "square"
    SEXTILE = "sextile"
    QUINCUNX = "quincunx"
    SEMI_SEXTILE = "semi-sextile"


class OriginKind(Enum):
    """Upstream producer that emitted a token."""
    NATAL = "natal"
    TRANSIT = "transit"
    PROGRESSED = "progressed"
    WEATHER = "weather"
    PHASE = "phase"
    AXIS = "axis"
    CURRENT_SUN = "current_sun"


def parse_enum(enum_cls: Type[E], value) -> Optional[E]:
    """
    Parse a loose upstream value into a member of enum_cls.

    Accepts an existing member, the member value ("Venus"), or the member
    name in any case ("VENUS", "north_node"). None and "" map to None.

    Args:
        enum_cls: Target enumeration
        value: Raw value from upstream data

    Returns:
        Enum member, or None when value is empty

    Raises:
        ValueError: If value does not name a member of enum_cls
    """
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value

    text = str(value).strip()
    lowered = text.lower()
    for member in enum_cls:
        if member.value.lower() == lowered:
            return member
        if member.name.lower() == lowered.replace(" ", "_").replace("-", "_"):
            return member

    raise ValueError(f"Unknown {enum_cls.__name__}: {value!r}")


def parse_aspect(value) -> Optional[AspectKind]:
    """
    Parse an aspect kind, also accepting full aspect phrases.

    Upstream producers often describe an aspect as "Sun trine Venus";
    the aspect keyword is extracted from such phrases.
    """
    if value is None or value == "" or isinstance(value, AspectKind):
        return value or None
    try:
        return parse_enum(AspectKind, value)
    except ValueError:
        words = str(value).lower().split()
        for member in AspectKind:
            if member.value in words:
                return member
        raise
