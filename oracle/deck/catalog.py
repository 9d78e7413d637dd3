"""
Deck Catalog for the Daily Energy Engine.

Loads the static card catalog once, lazily and thread-safely, and serves it
read-only afterwards.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Tuple, Union

from oracle.config import DEFAULT_DECK_PATH
from oracle.deck.card import Card
from oracle.deck.validator import validate_catalog
from oracle.errors import CatalogDecodeError, DeckUnavailableError

logger = logging.getLogger(__name__)


def parse_catalog(data: Any) -> Tuple[Card, ...]:
    """
    Decode a catalog document (a JSON array of card records).

    Raises:
        CatalogDecodeError: If the document or any record is malformed
    """
    if not isinstance(data, list):
        raise CatalogDecodeError(f"catalog must be a JSON array, got {type(data).__name__}")
    return tuple(Card.from_dict(record, index=i) for i, record in enumerate(data))


class DeckCatalog:
    """
    Lazily loaded, immutable card catalog.

    The first call to load() reads and decodes the file under a lock
    (double-checked). Afterwards reads are lock-free over a tuple.
    A failed load is not cached; the next call tries again.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_DECK_PATH, validate: bool = True):
        """
        Initialize catalog.

        Args:
            path: Path to the JSON catalog
            validate: Run the catalog validator after the first load
        """
        self.path = Path(path)
        self.validate = validate
        self._cards: Optional[Tuple[Card, ...]] = None
        self._lock = threading.Lock()

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> "DeckCatalog":
        """Build an already-loaded catalog from in-memory cards."""
        catalog = cls(path="<memory>", validate=False)
        catalog._cards = tuple(cards)
        return catalog

    def load(self) -> Tuple[Card, ...]:
        """
        Return the catalog, loading it on first use.

        Raises:
            DeckUnavailableError: If the file is missing or cannot be parsed
        """
        cards = self._cards
        if cards is not None:
            return cards

        with self._lock:
            if self._cards is None:
                self._cards = self._read()
            return self._cards

    def _read(self) -> Tuple[Card, ...]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise DeckUnavailableError(f"Card catalog not found: {self.path}")
        except OSError as e:
            raise DeckUnavailableError(f"Cannot read card catalog {self.path}: {e}")
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CatalogDecodeError(f"invalid JSON in {self.path}: {e}")

        cards = parse_catalog(data)
        logger.info(f"[DECK] Loaded {len(cards)} cards from {self.path}")

        if self.validate:
            validate_catalog(cards)
        return cards

    def is_ready(self) -> bool:
        """True when the catalog is loaded (or loads now) and is non-empty."""
        try:
            return len(self.load()) > 0
        except DeckUnavailableError as e:
            logger.warning(f"[DECK] Catalog unavailable: {e}")
            return False

    @property
    def cards(self) -> Tuple[Card, ...]:
        return self.load()

    def get(self, name: str) -> Optional[Card]:
        """Look up a card by name (case-insensitive)."""
        wanted = name.lower()
        for card in self.load():
            if card.name.lower() == wanted:
                return card
        return None

    def __iter__(self) -> Iterator[Card]:
        return iter(self.load())

    def __len__(self) -> int:
        return len(self.load())
