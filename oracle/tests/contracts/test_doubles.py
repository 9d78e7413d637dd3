"""
Test doubles (fakes, stubs) for oracle contract tests.

These provide minimal implementations of the catalog and recency backend
interfaces without touching the real deck file or the user's home directory.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from oracle.deck.card import Arcana, Card, Suit
from oracle.errors import DeckUnavailableError
from oracle.state.recency_backend import InMemoryRecencyBackend, RecencyBackend


NEUTRAL_AFFINITY = {"classic": 0.5, "playful": 0.5, "romantic": 0.5, "utility": 0.5, "drama": 0.5, "edge": 0.5}


def make_card(
    name: str,
    arcana: Arcana = Arcana.MINOR,
    suit: Optional[Suit] = Suit.CUPS,
    number: Optional[int] = 5,
    energy_affinity: Optional[Dict[str, float]] = None,
    axes_affinity: Optional[Dict[str, float]] = None,
) -> Card:
    """Build a card with neutral defaults."""
    if arcana is Arcana.MAJOR:
        suit = None
    return Card(
        name=name,
        arcana=arcana,
        suit=suit,
        number=number,
        keywords=("test",),
        themes=("Testing",),
        energy_affinity=dict(energy_affinity if energy_affinity is not None else NEUTRAL_AFFINITY),
        axes_affinity=axes_affinity,
        description=f"{name} test card",
    )


def comparable_deck(count: int = 12) -> List[Card]:
    """
    Cards with identical affinities and mid-range axes.

    Every card scores the same, so only recency and tie-breaking separate them.
    """
    axes = {"action": 50, "tempo": 50, "strategy": 50, "visibility": 50}
    return [make_card(f"Card {i:02d}", number=(i % 9) + 2, axes_affinity=dict(axes)) for i in range(count)]


class FakeDeckCatalog:
    """Fake DeckCatalog serving in-memory cards, or failing on demand."""

    def __init__(self, cards: Sequence[Card] = (), error: Optional[Exception] = None):
        self._cards = tuple(cards)
        self._error = error
        self.load_calls = 0

    def load(self) -> Tuple[Card, ...]:
        self.load_calls += 1
        if self._error is not None:
            raise self._error
        return self._cards

    @classmethod
    def unavailable(cls, message: str = "deck missing") -> "FakeDeckCatalog":
        return cls(error=DeckUnavailableError(message))


class FlakyRecencyBackend(RecencyBackend):
    """
    In-memory backend that raises OSError for the first `failures` calls.

    failures=None fails forever.
    """

    def __init__(self, failures: Optional[int] = 1):
        self._inner = InMemoryRecencyBackend()
        self._remaining = failures
        self.calls = 0

    def _maybe_fail(self) -> None:
        self.calls += 1
        if self._remaining is None:
            raise OSError("backend unavailable")
        if self._remaining > 0:
            self._remaining -= 1
            raise OSError("transient backend failure")

    def get(self, profile: str) -> Dict[str, str]:
        self._maybe_fail()
        return self._inner.get(profile)

    def put(self, profile: str, iso_day: str, card_name: str) -> None:
        self._maybe_fail()
        self._inner.put(profile, iso_day, card_name)

    def purge(self, profile: str, before_iso_day: Optional[str] = None) -> int:
        self._maybe_fail()
        return self._inner.purge(profile, before_iso_day)


class StaticRecencyBackend(RecencyBackend):
    """Backend returning fixed raw entries, including malformed ones."""

    def __init__(self, entries: Dict[str, object]):
        self.entries = entries
        self.puts: List[Tuple[str, str, str]] = []

    def get(self, profile: str) -> Dict[str, str]:
        return dict(self.entries)

    def put(self, profile: str, iso_day: str, card_name: str) -> None:
        self.puts.append((profile, iso_day, card_name))

    def purge(self, profile: str, before_iso_day: Optional[str] = None) -> int:
        return 0
