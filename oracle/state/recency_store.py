"""
Recency Store for the Daily Energy Engine.

Short-term memory of which card each profile drew on each calendar day.
Used by CardSelector to avoid near-term repeats.

Retention window is 7 days. The store never fails its caller: a missing
backend, persistent I/O errors or corrupt entries all read as "no history".
"""

import logging
import threading
import time
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple, TypeVar, Union

from oracle.state.recency_backend import RecencyBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETENTION_DAYS: int = 7

# decay multiplier = max(DECAY_FLOOR, 1 - DECAY_STEP * (8 - days_ago))
DECAY_FLOOR: float = 0.55
DECAY_STEP: float = 0.12

DEFAULT_COOLDOWN_DAYS: int = 3
DEFAULT_RETRY_MS: Tuple[int, ...] = (50, 100, 200)

DayLike = Union[date, datetime, str, None]


def as_day(value: DayLike = None) -> date:
    """
    Normalize a day reference to a local calendar date.

    None means today. Aware datetimes are converted to the local time zone
    before truncation; ISO strings ("YYYY-MM-DD") are parsed.
    """
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class RecencyStore:
    """
    Per-profile daily selection history with decay scoring.

    Thread safety: each profile has its own RLock, created under a registry
    lock. Different profiles proceed concurrently.
    """

    def __init__(
        self,
        backend: Optional[RecencyBackend],
        retry_schedule_ms: Sequence[int] = DEFAULT_RETRY_MS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize recency store.

        Args:
            backend: Persistence backend, or None for a store with no memory
            retry_schedule_ms: Delays between attempts after an OSError
            sleep: Sleep function (injectable for tests)
        """
        self.backend = backend
        self.retry_schedule_ms = tuple(retry_schedule_ms)
        self._sleep = sleep
        self._profile_locks: Dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, profile: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._profile_locks.get(profile)
            if lock is None:
                lock = threading.RLock()
                self._profile_locks[profile] = lock
            return lock

    def _call(self, op: str, fn: Callable[[], T], default: T) -> T:
        """
        Run a backend operation with bounded retry on OSError.

        Returns default once retries are exhausted.
        """
        if self.backend is None:
            return default

        attempts = len(self.retry_schedule_ms) + 1
        for attempt in range(attempts):
            try:
                return fn()
            except OSError as e:
                if attempt < len(self.retry_schedule_ms):
                    delay_ms = self.retry_schedule_ms[attempt]
                    logger.debug(f"[RECENCY] {op} failed ({e}), retrying in {delay_ms}ms")
                    self._sleep(delay_ms / 1000.0)
                else:
                    logger.warning(f"[RECENCY] {op} failed after {attempts} attempts: {e}")
            except (ValueError, TypeError) as e:
                logger.warning(f"[RECENCY] {op} returned unusable data: {e}")
                break
        return default

    def _entries(self, profile: str) -> Dict[date, str]:
        """Load a profile's entries, dropping anything that does not parse."""
        raw = self._call(f"get({profile})", lambda: self.backend.get(profile), {})
        entries: Dict[date, str] = {}
        for iso_day, card_name in raw.items():
            if not isinstance(card_name, str) or not card_name:
                logger.debug(f"[RECENCY] Ignoring corrupt entry {iso_day!r}: {card_name!r}")
                continue
            try:
                entries[date.fromisoformat(str(iso_day))] = card_name
            except ValueError:
                logger.debug(f"[RECENCY] Ignoring entry with bad date {iso_day!r}")
        return entries

    def record(self, profile: str, card_name: str, day: DayLike = None) -> None:
        """
        Record the card drawn for (profile, day).

        Idempotent per day: a second record on the same day overwrites.
        Failures are logged and swallowed.
        """
        iso_day = as_day(day).isoformat()

        def put() -> bool:
            self.backend.put(profile, iso_day, card_name)
            return True

        with self._lock_for(profile):
            stored = self._call(f"put({profile}, {iso_day})", put, False)
        if stored:
            logger.info(f"[RECENCY] Recorded {card_name} for {profile} on {iso_day}")
        else:
            logger.debug(f"[RECENCY] {card_name} for {profile} on {iso_day} not recorded")

    def recent_selections(self, profile: str, reference_day: DayLike = None) -> List[Tuple[str, int]]:
        """
        Cards drawn within the retention window.

        Returns:
            List of (card_name, days_ago) with 0 <= days_ago <= 7,
            most recent first
        """
        ref = as_day(reference_day)
        with self._lock_for(profile):
            entries = self._entries(profile)

        recent = []
        for day, card_name in entries.items():
            days_ago = (ref - day).days
            if 0 <= days_ago <= RETENTION_DAYS:
                recent.append((card_name, days_ago))
        recent.sort(key=lambda item: item[1])
        return recent

    def days_since(self, card_name: str, profile: str, reference_day: DayLike = None) -> Optional[int]:
        """Days since card_name was last drawn within the window, or None."""
        wanted = card_name.lower()
        for name, days_ago in self.recent_selections(profile, reference_day):
            if name.lower() == wanted:
                return days_ago
        return None

    def decay_penalty(self, card_name: str, profile: str, reference_day: DayLike = None) -> float:
        """
        Score multiplier for a recently drawn card.

        1.0 when the card is absent from the window; otherwise
        max(0.55, 1 - 0.12 * (8 - days_ago)), so older draws weigh less.
        """
        days_ago = self.days_since(card_name, profile, reference_day)
        if days_ago is None:
            return 1.0
        return max(DECAY_FLOOR, 1.0 - DECAY_STEP * (8 - days_ago))

    def cooldown_cards(
        self,
        profile: str,
        reference_day: DayLike = None,
        cooldown_days: int = DEFAULT_COOLDOWN_DAYS,
    ) -> Set[str]:
        """Names of cards drawn within the last cooldown_days days (today included)."""
        return {
            name
            for name, days_ago in self.recent_selections(profile, reference_day)
            if days_ago <= cooldown_days
        }

    def purge_expired(self, profile: str, reference_day: DayLike = None) -> int:
        """
        Delete entries older than the retention window.

        Returns:
            Number of entries removed (0 on failure)
        """
        cutoff = (as_day(reference_day) - timedelta(days=RETENTION_DAYS)).isoformat()
        with self._lock_for(profile):
            removed = self._call(
                f"purge({profile}, before={cutoff})",
                lambda: self.backend.purge(profile, cutoff),
                0,
            )
        if removed:
            logger.debug(f"[RECENCY] Purged {removed} expired entries for {profile}")
        return removed

    def clear(self, profile: str) -> int:
        """Remove every entry for a profile."""
        with self._lock_for(profile):
            removed = self._call(f"clear({profile})", lambda: self.backend.purge(profile, None), 0)
        logger.info(f"[RECENCY] Cleared {removed} entries for {profile}")
        return removed
