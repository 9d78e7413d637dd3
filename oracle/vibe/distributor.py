"""
Vibe Distributor for the Daily Energy Engine.

Maps a weighted token pool onto six style energies and normalizes the
result to exactly 21 points.

Each energy owns a keyword set and a bonus function that inspects the
token's category, planetary source, sign element, origin kind and weight.
A matching token contributes `weight * 2 + bonus` to the energy's raw score.
"""

import logging
import math
from typing import Callable, Dict, FrozenSet, List, Mapping, Sequence

from oracle.tokens.provenance import Element, OriginKind, Planet
from oracle.tokens.semantic_token import SemanticToken
from oracle.vibe.breakdown import (
    DEFAULT_BREAKDOWN,
    ENERGIES,
    MAX_ENERGY_POINTS,
    TOTAL_POINTS,
    VibeBreakdown,
)

logger = logging.getLogger(__name__)

BASE_WEIGHT_MULTIPLIER: float = 2.0

CLASSIC_TOKENS: FrozenSet[str] = frozenset({
    "structured", "grounded", "reserved", "solid", "refined", "polished",
    "professional", "timeless", "balanced", "harmonious", "elegant",
    "sophisticated", "classic", "conservative", "traditional", "disciplined",
    "authoritative", "enduring", "substantial", "commanding", "navy",
    "charcoal", "slate gray", "stone", "cream", "tailored", "crisp",
})

PLAYFUL_TOKENS: FrozenSet[str] = frozenset({
    "bright", "vibrant", "dynamic", "energetic", "fun", "expressive",
    "creative", "colorful", "light", "airy", "versatile", "quick",
    "adaptable", "communicative", "cheerful", "bright yellow",
    "neon turquoise", "electric blue", "playful", "lively", "spirited",
})

ROMANTIC_TOKENS: FrozenSet[str] = frozenset({
    "flowing", "soft", "gentle", "dreamy", "ethereal", "luxurious",
    "sensual", "beautiful", "harmonious", "nurturing", "comfortable",
    "warm", "delicate", "feminine", "graceful", "misty lavender",
    "pale yellow", "seafoam", "opalescent blue", "fluid",
})

UTILITY_TOKENS: FrozenSet[str] = frozenset({
    "practical", "functional", "comfortable", "waterproof", "durable",
    "purposeful", "protective", "substantial", "enduring", "reliable",
    "versatile", "structured", "tactical", "insulating", "layerable",
    "breathable", "weatherproof",
})

DRAMA_TOKENS: FrozenSet[str] = frozenset({
    "bold", "intense", "powerful", "dramatic", "striking", "rich",
    "deep", "transformative", "commanding", "magnetic", "luxurious",
    "royal", "electric", "plutonium", "metallic", "royal purple",
    "deep burgundy", "electric blue", "plutonium purple", "radiant",
})

EDGE_TOKENS: FrozenSet[str] = frozenset({
    "unconventional", "innovative", "unique", "unexpected", "electric",
    "neon", "metallic", "textured", "distinctive", "rebellious",
    "avant-garde", "edgy", "alternative", "disruptive", "experimental",
})


def _contains_any(name: str, fragments: Sequence[str]) -> bool:
    return any(fragment in name for fragment in fragments)


def _element(token: SemanticToken):
    return token.sign.element if token.sign else None


def classic_bonus(token: SemanticToken) -> float:
    bonus = 0.0
    if token.category == "structure":
        bonus += 1.0
    if token.weight > 2.0:
        bonus += 1.0
    if token.planet is Planet.SATURN:
        bonus += 1.5
    if _element(token) is Element.EARTH:
        bonus += 0.5
    return bonus


def playful_bonus(token: SemanticToken) -> float:
    bonus = 0.0
    if token.category == "expression":
        bonus += 1.0
    if token.category == "color_quality" and _contains_any(token.key, ("bright", "vibrant", "electric")):
        bonus += 1.5
    if token.planet is Planet.MERCURY:
        bonus += 1.0
    if _element(token) is Element.AIR:
        bonus += 0.5
    return bonus


def romantic_bonus(token: SemanticToken) -> float:
    bonus = 0.0
    if token.category == "texture":
        bonus += 1.0
    if token.planet is Planet.VENUS:
        bonus += 2.0
    elif token.planet is Planet.MOON:
        bonus += 1.5
    if _element(token) is Element.WATER:
        bonus += 1.0
    return bonus


def utility_bonus(token: SemanticToken) -> float:
    bonus = 0.0
    if token.origin is OriginKind.WEATHER:
        bonus += 2.0
    if token.planet is Planet.SATURN:
        bonus += 1.5
    if token.planet is Planet.MARS and _contains_any(token.key, ("practical", "protective", "tactical")):
        bonus += 1.0
    return bonus


def drama_bonus(token: SemanticToken) -> float:
    bonus = 0.0
    if token.weight > 3.0:
        bonus += 1.5
    if token.planet is Planet.PLUTO:
        bonus += 2.0
    elif token.planet is Planet.MARS:
        bonus += 1.0
    if _element(token) is Element.FIRE:
        bonus += 1.0
    return bonus


def edge_bonus(token: SemanticToken) -> float:
    bonus = 0.0
    if token.planet is Planet.URANUS:
        bonus += 2.5
    # only reached for tokens already in EDGE_TOKENS
    if token.weight > 2.5:
        bonus += 1.5
    if token.origin is OriginKind.TRANSIT and _contains_any(token.key, ("innovative", "unexpected", "disruptive")):
        bonus += 1.0
    return bonus


ENERGY_RULES: Dict[str, tuple] = {
    "classic": (CLASSIC_TOKENS, classic_bonus),
    "playful": (PLAYFUL_TOKENS, playful_bonus),
    "romantic": (ROMANTIC_TOKENS, romantic_bonus),
    "utility": (UTILITY_TOKENS, utility_bonus),
    "drama": (DRAMA_TOKENS, drama_bonus),
    "edge": (EDGE_TOKENS, edge_bonus),
}


def raw_scores(tokens: Sequence[SemanticToken]) -> Dict[str, float]:
    """
    Accumulate `weight * 2 + bonus` per energy for every matching token.

    Zero-weight tokens carry no influence, bonuses included.
    """
    scores = {energy: 0.0 for energy in ENERGIES}
    for token in tokens:
        if token.weight <= 0:
            continue
        name = token.key
        for energy in ENERGIES:
            keywords, bonus_fn = ENERGY_RULES[energy]
            if name in keywords:
                scores[energy] += token.weight * BASE_WEIGHT_MULTIPLIER + bonus_fn(token)
    return scores


def _largest_remainder(weights: Mapping[str, float], budget: int) -> Dict[str, int]:
    """
    Split budget proportionally to weights using the largest remainder method.

    Zero total weight splits evenly. Remainder ties go to the energy seen first.
    """
    total = sum(weights.values())
    if total > 0:
        shares = {e: weights[e] / total * budget for e in weights}
    else:
        shares = {e: budget / len(weights) for e in weights}

    allocation = {e: int(math.floor(shares[e])) for e in weights}
    leftover = budget - sum(allocation.values())

    # sorted() is stable, so equal remainders keep iteration order
    by_remainder = sorted(weights, key=lambda e: -(shares[e] - allocation[e]))
    for energy in by_remainder[:leftover]:
        allocation[energy] += 1
    return allocation


def apportion(
    scores: Mapping[str, float],
    budget: int = TOTAL_POINTS,
    cap: int = MAX_ENERGY_POINTS,
) -> Dict[str, int]:
    """
    Apportion budget across energies with a per-energy cap.

    An energy whose share exceeds cap is fixed at cap and the rest of the
    budget is re-apportioned over the remaining energies. The result always
    sums to budget.
    """
    fixed: Dict[str, int] = {}
    active: List[str] = [e for e in ENERGIES]
    remaining = budget

    while active:
        allocation = _largest_remainder({e: scores[e] for e in active}, remaining)
        over = [e for e in active if allocation[e] > cap]
        if not over:
            fixed.update(allocation)
            break
        for energy in over:
            logger.debug(f"[VIBE] {energy} capped at {cap} (share {allocation[energy]}), redistributing overflow")
            fixed[energy] = cap
            remaining -= cap
            active.remove(energy)

    return {energy: fixed.get(energy, 0) for energy in ENERGIES}


class VibeDistributor:
    """
    Maps token pools to 21-point VibeBreakdowns.

    Stateless; one instance can serve concurrent callers.
    """

    def __init__(self, scorer: Callable[[Sequence[SemanticToken]], Dict[str, float]] = raw_scores):
        self._scorer = scorer

    def distribute(self, tokens: Sequence[SemanticToken]) -> VibeBreakdown:
        """
        Generate a 21-point vibe breakdown from tokens.

        Args:
            tokens: Token pool (ideally already merged)

        Returns:
            VibeBreakdown summing to exactly 21, each field in [0, 10]
        """
        scores = self._scorer(tokens)
        total = sum(scores.values())

        if total <= 0:
            logger.debug(f"[VIBE] No energy matches in {len(tokens)} tokens, using default breakdown")
            return DEFAULT_BREAKDOWN

        breakdown = VibeBreakdown.from_mapping(apportion(scores))
        logger.debug(
            f"[VIBE] Raw scores: "
            + ", ".join(f"{e}={s:.2f}" for e, s in scores.items())
            + f" -> {breakdown}"
        )
        return breakdown


def distribute(tokens: Sequence[SemanticToken]) -> VibeBreakdown:
    return VibeDistributor().distribute(tokens)
