"""
Shared pytest fixtures for oracle contract tests.

Tests use in-memory backends and fake catalogs; the only real file read is
the bundled card catalog, and persistence tests write under tmp_path.
"""

from datetime import date

import pytest

from oracle.axes.axis_model import AxisVector
from oracle.config import DEFAULT_DECK_PATH
from oracle.deck.catalog import DeckCatalog
from oracle.state.recency_backend import InMemoryRecencyBackend
from oracle.state.recency_store import RecencyStore
from oracle.tests.contracts.test_doubles import FakeDeckCatalog, comparable_deck
from oracle.vibe.breakdown import DEFAULT_BREAKDOWN, VibeBreakdown


@pytest.fixture
def reference_day():
    """Fixed reference day so results never depend on the wall clock."""
    return date(2025, 6, 15)


@pytest.fixture
def memory_store():
    """RecencyStore over an in-memory backend with no real sleeping."""
    return RecencyStore(InMemoryRecencyBackend(), sleep=lambda seconds: None)


@pytest.fixture
def bundled_catalog():
    """The real 78-card catalog shipped with the package."""
    return DeckCatalog(DEFAULT_DECK_PATH)


@pytest.fixture
def comparable_catalog():
    """Twelve cards that score identically."""
    return FakeDeckCatalog(comparable_deck(12))


@pytest.fixture
def mid_axes():
    return AxisVector(action=5.5, tempo=5.5, strategy=5.5, visibility=5.5)


@pytest.fixture
def default_vibe():
    return DEFAULT_BREAKDOWN


@pytest.fixture
def utility_vibe():
    return VibeBreakdown(classic=3, playful=2, romantic=2, utility=10, drama=2, edge=2)
