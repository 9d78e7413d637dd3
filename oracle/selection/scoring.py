"""
Card scoring for the Daily Energy Engine.

Pure functions used by CardSelector:
- Stage 1: axis similarity against a kinetic-dependent floor
- Stage 2: weighted sum of axis similarity, vibe alignment and suit boost,
  minus a recency penalty
- Seeded jitter and tie-break constants
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from oracle.axes.axis_model import AXIS_NAMES, AxisVector
from oracle.deck.card import Arcana, Card, Suit
from oracle.vibe.breakdown import TOTAL_POINTS, VibeBreakdown

# Largest possible distance between two vectors on the 1-10 scale is
# sqrt(4 * 81) = 18
SIMILARITY_SCALE: float = 18.0

AXIS_WEIGHT: float = 60.0
VIBE_WEIGHT: float = 25.0

DOMINANT_SHARE: float = 0.7
SECONDARY_SHARE: float = 0.3

SUIT_BOOST_MIN: float = -1.0
SUIT_BOOST_MAX: float = 3.5

HIGH_AXIS: float = 7.0
LOW_AXIS: float = 3.5
LOW_KINETIC: float = 4.0

# days_ago -> penalty; anything older carries no penalty
RECENCY_PENALTIES = {0: 100.0, 1: 50.0, 2: 20.0, 3: 10.0}

JITTER_SCALE: float = 0.001
JITTER_FREQUENCY: float = 0.1

TIE_EPSILON: float = 1.5
AXIS_TIE_EPSILON: float = 0.05

PUBLIC_CARDS = frozenset({
    "the sun", "the star", "the emperor", "the chariot", "the world",
    "judgement", "six of wands", "the magician",
})

PRIVATE_CARDS = frozenset({
    "the hermit", "the high priestess", "the moon", "four of swords",
    "seven of cups", "the hanged man", "eight of cups",
})


@dataclass
class ScoreBreakdown:
    """Per-card score components, kept for diagnostics."""
    card: Card
    axis_similarity: float
    axis_score: float
    vibe_score: float
    suit_boost: float
    recency_penalty: float
    jitter: float = 0.0

    @property
    def total(self) -> float:
        return self.axis_score + self.vibe_score + self.suit_boost - self.recency_penalty + self.jitter

    def to_dict(self) -> dict:
        return {
            "card": self.card.name,
            "axis_similarity": round(self.axis_similarity, 4),
            "axis_score": round(self.axis_score, 3),
            "vibe_score": round(self.vibe_score, 3),
            "suit_boost": round(self.suit_boost, 3),
            "recency_penalty": self.recency_penalty,
            "jitter": round(self.jitter, 5),
            "total": round(self.total, 3),
        }


def axis_similarity(card: Card, axes: AxisVector) -> float:
    """1 - euclidean distance / 18, clamped to [0, 1]."""
    distance = float(np.linalg.norm(card.axis_vector().as_array() - axes.as_array()))
    return min(1.0, max(0.0, 1.0 - distance / SIMILARITY_SCALE))


def similarity_floor(axes: AxisVector) -> float:
    """
    Stage 1 minimum similarity.

    Extreme kinetic days demand a closer match than mid-range days.
    """
    kinetic = axes.kinetic
    if kinetic >= 8.0 or kinetic <= 3.5:
        return 0.60
    if kinetic >= 6.5:
        return 0.50
    return 0.40


def vibe_alignment(card: Card, vibe: VibeBreakdown) -> float:
    dominant = vibe.dominant_energy
    secondary = vibe.secondary_energy
    return (
        DOMINANT_SHARE * card.affinity(dominant) * vibe.points(dominant) / TOTAL_POINTS
        + SECONDARY_SHARE * card.affinity(secondary) * vibe.points(secondary) / TOTAL_POINTS
    )


def suit_boost(card: Card, axes: AxisVector) -> float:
    """Contextual boost from suit, rank and card name, clamped to [-1.0, 3.5]."""
    boost = 0.0
    kinetic = axes.kinetic
    name = card.name.lower()

    if kinetic >= HIGH_AXIS:
        if card.suit is Suit.WANDS:
            boost += 1.5
        elif card.suit is Suit.SWORDS:
            boost += 1.0
        elif card.suit is Suit.PENTACLES:
            boost -= 1.0
    elif kinetic <= LOW_KINETIC:
        if card.suit is Suit.PENTACLES:
            boost += 1.0
        elif card.suit is Suit.CUPS:
            boost += 0.5

    if axes.strategy >= HIGH_AXIS:
        if card.is_court:
            boost += 1.0
        elif card.arcana is Arcana.MAJOR:
            boost += 0.5
    elif axes.strategy <= LOW_AXIS:
        if card.arcana is Arcana.MINOR and card.number in (1, 11):
            boost += 1.0
        elif name == "the fool":
            boost += 1.0

    if axes.visibility >= HIGH_AXIS and name in PUBLIC_CARDS:
        boost += 1.0
    elif axes.visibility <= LOW_AXIS and name in PRIVATE_CARDS:
        boost += 1.0

    return min(SUIT_BOOST_MAX, max(SUIT_BOOST_MIN, boost))


def recency_penalty(days_since: Optional[int]) -> float:
    if days_since is None:
        return 0.0
    return RECENCY_PENALTIES.get(days_since, 0.0)


def jitter(card: Card, axes: AxisVector, seed: int) -> float:
    """
    Small deterministic perturbation that varies day to day.

    Card affinities (0-100) are compared with the day's axes scaled by 10.
    """
    spread = sum(abs(card.axis_affinity(axis) - getattr(axes, axis) * 10.0) for axis in AXIS_NAMES)
    return spread * JITTER_SCALE * math.sin(seed * JITTER_FREQUENCY)


def score_card(
    card: Card,
    axes: AxisVector,
    vibe: VibeBreakdown,
    days_since: Optional[int] = None,
    use_axes: bool = True,
) -> ScoreBreakdown:
    """
    Stage 2 score for one card.

    With use_axes False the axis term is dropped (vibe-only fallback);
    similarity is still computed for tie-breaking.
    """
    similarity = axis_similarity(card, axes)
    return ScoreBreakdown(
        card=card,
        axis_similarity=similarity,
        axis_score=similarity * AXIS_WEIGHT if use_axes else 0.0,
        vibe_score=vibe_alignment(card, vibe) * VIBE_WEIGHT,
        suit_boost=suit_boost(card, axes),
        recency_penalty=recency_penalty(days_since),
    )
