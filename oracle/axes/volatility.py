"""
Axis Volatility for the Daily Energy Engine.

Creates meaningful day-to-day axis variation from four independent
multiplicative factors:
1. Transit intensity: more transits raise action and tempo, lower strategy
2. Lunar phase: new/full moon raise action, tempo, visibility; quarters raise strategy
3. Token diversity: fast/slow, strategic and expressive keyword ratios
4. Daily seed: sinusoidal variation, reproducible for a fixed seed

The product is clamped to [1, 10] and re-balanced.
"""

import logging
import math
from typing import Sequence

import numpy as np

from oracle.axes.axis_model import AXIS_MAX, AXIS_MIN, AxisVector
from oracle.axes.balancer import balance
from oracle.tokens.semantic_token import SemanticToken

logger = logging.getLogger(__name__)

TRANSIT_SATURATION: float = 30.0
TRANSIT_INTENSITY_CAP: float = 2.0

FAST_TOKENS = frozenset({"quick", "rapid", "kinetic", "dynamic"})
SLOW_TOKENS = frozenset({"deliberate", "grounded", "enduring", "stable"})
STRATEGIC_TOKENS = frozenset({"structured", "planned", "methodical", "systematic"})
EXPRESSIVE_TOKENS = frozenset({"expressive", "visible", "prominent", "bold"})

# (frequency, amplitude) per axis
SEED_MODULATION = (
    (0.1234, 0.12),
    (0.2345, 0.15),
    (0.3456, 0.10),
    (0.4567, 0.13),
)


def transit_factor(transit_count: int) -> np.ndarray:
    intensity = min(max(transit_count, 0) / TRANSIT_SATURATION, TRANSIT_INTENSITY_CAP)
    return np.array([
        1.0 + intensity * 0.15,   # +0-30% action
        1.0 + intensity * 0.20,   # +0-40% tempo
        1.0 - intensity * 0.10,   # -0-20% strategy
        1.0 + intensity * 0.05,   # +0-10% visibility
    ])


def lunar_factor(phase: float) -> np.ndarray:
    """phase: 0.0 new moon, 0.5 full moon, 1.0 new moon again."""
    phase = min(max(phase, 0.0), 1.0)
    fullness = abs(phase - 0.5) * 2.0
    return np.array([
        1.0 + fullness * 0.10,
        1.0 + fullness * 0.08,
        1.0 + (1.0 - fullness) * 0.12,
        1.0 + fullness * 0.15,
    ])


def token_diversity_factor(tokens: Sequence[SemanticToken]) -> np.ndarray:
    names = [t.key for t in tokens]
    fast = sum(1 for n in names if n in FAST_TOKENS)
    slow = sum(1 for n in names if n in SLOW_TOKENS)
    strategic = sum(1 for n in names if n in STRATEGIC_TOKENS)
    expressive = sum(1 for n in names if n in EXPRESSIVE_TOKENS)

    speed_ratio = fast / max(fast + slow, 1)
    strategy_ratio = strategic / len(names) if names else 0.0
    expression_ratio = expressive / len(names) if names else 0.0

    return np.array([
        1.0 + (speed_ratio * 0.20 - 0.10),
        1.0 + (speed_ratio * 0.25 - 0.125),
        1.0 + (strategy_ratio * 0.30 - 0.15),
        1.0 + (expression_ratio * 0.20 - 0.10),
    ])


def seed_factor(seed: int) -> np.ndarray:
    return np.array([1.0 + math.sin(seed * freq) * amp for freq, amp in SEED_MODULATION])


def modulate(
    base: AxisVector,
    tokens: Sequence[SemanticToken],
    transit_count: int,
    lunar_phase: float,
    daily_seed: int,
) -> AxisVector:
    """
    Generate the final daily axes from the base vector.

    Pure function of its inputs: the same seed always yields the same output.

    Args:
        base: Precomputed base axes
        tokens: Token pool (names are inspected for diversity hints)
        transit_count: Number of active transits today
        lunar_phase: Lunar phase fraction in [0, 1]
        daily_seed: Deterministic daily seed

    Returns:
        Clamped and balanced AxisVector
    """
    factors = np.vstack([
        transit_factor(transit_count),
        lunar_factor(lunar_phase),
        token_diversity_factor(tokens),
        seed_factor(daily_seed),
    ])
    modulated = base.as_array() * factors.prod(axis=0)
    clamped = np.clip(modulated, AXIS_MIN, AXIS_MAX)
    result = balance(AxisVector.from_array(clamped))

    logger.debug(
        f"[AXES] Modulated {base} -> {result} "
        f"(transits={transit_count}, phase={lunar_phase:.2f}, seed={daily_seed})"
    )
    return result
