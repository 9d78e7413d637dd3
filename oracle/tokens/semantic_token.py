"""
Semantic Token model for the Daily Energy Engine.

A SemanticToken is the atomic unit produced by upstream feature
extraction (natal placements, transits, weather, lunar phase, derived
axes). The engine consumes tokens read-only.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional

from oracle.tokens.provenance import (
    AspectKind,
    OriginKind,
    Planet,
    Sign,
    parse_aspect,
    parse_enum,
)


@dataclass(frozen=True)
class SemanticToken:
    """
    Weighted semantic label with optional provenance.

    Attributes:
        name: Label, e.g. "grounded", "bold", "practical"
        category: Token category, e.g. "mood", "structure", "texture"
        weight: Non-negative influence of the token
        planet: Planetary source, if any
        sign: Sign source, if any
        house: House number 1-12, if any
        aspect: Aspect kind that produced the token, if any
        origin: Kind of producer that emitted the token
    """
    name: str
    category: str = "mood"
    weight: float = 1.0
    planet: Optional[Planet] = None
    sign: Optional[Sign] = None
    house: Optional[int] = None
    aspect: Optional[AspectKind] = None
    origin: Optional[OriginKind] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Token name must not be empty")
        if self.weight < 0:
            raise ValueError(f"Token weight must be non-negative: {self.name}={self.weight}")
        if self.house is not None and not 1 <= self.house <= 12:
            raise ValueError(f"Token house must be 1-12: {self.name} house={self.house}")

    @property
    def key(self) -> str:
        """Case-insensitive identity used for keyword matching and merging."""
        return self.name.lower()

    def with_weight(self, weight: float) -> "SemanticToken":
        return replace(self, weight=weight)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SemanticToken":
        """
        Build a token from a loose upstream dictionary.

        Accepts both snake_case and the camelCase keys used by older
        producers (planetarySource, signSource, houseSource, aspectSource,
        originType, type).

        Raises:
            ValueError: On unknown provenance names or invalid values
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"token must be an object, got {type(data).__name__}")
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"token is missing a name: {dict(data)!r}")

        house = data.get("house", data.get("houseSource"))
        try:
            weight = float(data.get("weight", 1.0))
            house = int(house) if house is not None else None
        except (TypeError, ValueError):
            raise ValueError(f"{name}: weight and house must be numbers")

        return cls(
            name=name,
            category=str(data.get("category", data.get("type", "mood"))),
            weight=weight,
            planet=parse_enum(Planet, data.get("planet", data.get("planetarySource"))),
            sign=parse_enum(Sign, data.get("sign", data.get("signSource"))),
            house=house,
            aspect=parse_aspect(data.get("aspect", data.get("aspectSource"))),
            origin=parse_enum(OriginKind, data.get("origin", data.get("originType"))),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "weight": self.weight,
            "planet": self.planet.value if self.planet else None,
            "sign": self.sign.value if self.sign else None,
            "house": self.house,
            "aspect": self.aspect.value if self.aspect else None,
            "origin": self.origin.value if self.origin else None,
        }

    def __str__(self) -> str:
        desc = f"{self.name} ({self.category}, weight: {self.weight:.2f})"
        if self.planet:
            desc += f" from {self.planet.value}"
        if self.sign:
            desc += f" in {self.sign.value}"
        if self.house:
            desc += f" in house {self.house}"
        if self.aspect:
            desc += f" via {self.aspect.value}"
        return desc
