"""
Catalog validation for the Daily Energy Engine.

Checks a decoded catalog for structural problems. Problems are reported as
warnings and never stop the catalog from being used.
"""

import logging
from collections import Counter
from typing import List, Sequence

from oracle.axes.axis_model import AXIS_NAMES
from oracle.deck.card import AXIS_AFFINITY_MAX, Arcana, Card
from oracle.vibe.breakdown import ENERGIES

logger = logging.getLogger(__name__)

EXPECTED_MAJOR_COUNT = 22
EXPECTED_MINOR_COUNT = 56


def validate_catalog(cards: Sequence[Card]) -> List[str]:
    """
    Validate a catalog and log every problem found.

    Args:
        cards: Decoded catalog

    Returns:
        List of human-readable problems (empty when the catalog is clean)
    """
    problems: List[str] = []

    counts = Counter(card.name.lower() for card in cards)
    for name, count in sorted(counts.items()):
        if count > 1:
            problems.append(f"duplicate card name '{name}' ({count} records)")

    majors = sum(1 for card in cards if card.arcana is Arcana.MAJOR)
    minors = len(cards) - majors
    if majors != EXPECTED_MAJOR_COUNT:
        problems.append(f"expected {EXPECTED_MAJOR_COUNT} major arcana, found {majors}")
    if minors != EXPECTED_MINOR_COUNT:
        problems.append(f"expected {EXPECTED_MINOR_COUNT} minor arcana, found {minors}")

    for card in cards:
        if card.arcana is Arcana.MINOR:
            if card.suit is None:
                problems.append(f"{card.name}: minor arcana card without suit")
            if card.number is not None and not 1 <= card.number <= 14:
                problems.append(f"{card.name}: minor number {card.number} outside 1-14")
        elif card.number is not None and not 0 <= card.number <= 21:
            problems.append(f"{card.name}: major number {card.number} outside 0-21")

        for energy, value in card.energy_affinity.items():
            if energy not in ENERGIES:
                problems.append(f"{card.name}: unknown energy '{energy}'")
            elif not 0.0 <= value <= 1.0:
                problems.append(f"{card.name}: {energy} affinity {value:g} outside [0, 1]")

        for axis, value in (card.axes_affinity or {}).items():
            if axis not in AXIS_NAMES:
                problems.append(f"{card.name}: unknown axis '{axis}'")
            elif not 0.0 <= value <= AXIS_AFFINITY_MAX:
                problems.append(f"{card.name}: {axis} affinity {value:g} outside [0, {AXIS_AFFINITY_MAX:.0f}]")

    for problem in problems:
        logger.warning(f"[DECK] {problem}")
    if not problems:
        logger.debug(f"[DECK] Catalog of {len(cards)} cards passed validation")
    return problems
