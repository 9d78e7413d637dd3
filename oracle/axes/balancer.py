"""
Axis Balancer for the Daily Energy Engine.

Prevents single-axis dominance: axes above the ceiling are clipped and a
share of the excess is redistributed to the weaker axes, then every axis
is lifted to the floor.
"""

import logging
import math

import numpy as np

from oracle.axes.axis_model import AXIS_NAMES, AxisVector

logger = logging.getLogger(__name__)

MAX_AXIS_VALUE: float = 8.5
MIN_AXIS_VALUE: float = 2.0
REDISTRIBUTION_EFFICIENCY: float = 0.7
AVERAGE_THRESHOLD: float = 6.0

# (frequency, amplitude) per axis for add_daily_volatility
_VOLATILITY_OFFSETS = (
    (0.0731, 0.8),
    (0.1047, 1.0),
    (0.0613, 0.6),
    (0.0891, 0.9),
)


def balance(axes: AxisVector) -> AxisVector:
    """
    Balance axes to prevent single-axis dominance.

    Caps are applied in a single deterministic pass over action, tempo,
    strategy, visibility. The redistribution step reads the already
    capped vector as a whole.

    Args:
        axes: Axis vector to balance

    Returns:
        Balanced AxisVector with every axis in [MIN_AXIS_VALUE, MAX_AXIS_VALUE]
    """
    values = axes.as_array()
    pool = 0.0

    # Step 1: cap dominant axes, collecting recoverable excess
    for i in range(len(AXIS_NAMES)):
        if values[i] > MAX_AXIS_VALUE:
            pool += (values[i] - MAX_AXIS_VALUE) * REDISTRIBUTION_EFFICIENCY
            values[i] = MAX_AXIS_VALUE

    # Step 2: redistribute to axes below average
    below = values < AVERAGE_THRESHOLD
    count = int(below.sum())
    if count and pool > 0:
        share = pool / count
        values[below] = np.minimum(MAX_AXIS_VALUE, values[below] + share)

    # Step 3: floor
    values = np.maximum(MIN_AXIS_VALUE, values)

    balanced = AxisVector.from_array(values)
    if pool > 0:
        logger.debug(f"[AXES] Balanced {axes} -> {balanced} (pool={pool:.2f})")
    return balanced


def add_daily_volatility(axes: AxisVector, seed: int) -> AxisVector:
    """Add bounded seed-derived offsets to each axis and re-balance."""
    offsets = np.array([math.sin(seed * freq) * amp for freq, amp in _VOLATILITY_OFFSETS])
    return balance(AxisVector.from_array(axes.as_array() + offsets))
