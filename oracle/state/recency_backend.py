"""
Recency persistence backends for the Daily Energy Engine.

A backend is a small key-value repository holding, per profile, a mapping
of ISO calendar date ("YYYY-MM-DD") to the card name selected that day.
Backends may raise OSError on transient failures; RecencyStore owns retry
and fail-open behavior.
"""

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


class RecencyBackend(ABC):
    """
    Abstract repository for per-profile daily selections.

    All backends must implement get(), put() and purge().
    """

    @abstractmethod
    def get(self, profile: str) -> Dict[str, str]:
        """
        Return all stored entries for a profile.

        Args:
            profile: Profile identifier

        Returns:
            Mapping of ISO date string to card name (empty if none)
        """
        ...

    @abstractmethod
    def put(self, profile: str, iso_day: str, card_name: str) -> None:
        """
        Store the card for (profile, day), replacing any existing entry.
        """
        ...

    @abstractmethod
    def purge(self, profile: str, before_iso_day: Optional[str] = None) -> int:
        """
        Delete entries for a profile.

        Args:
            profile: Profile identifier
            before_iso_day: Delete only entries strictly older than this ISO
                date; None deletes every entry for the profile

        Returns:
            Number of entries removed
        """
        ...


class InMemoryRecencyBackend(RecencyBackend):
    """Process-local backend; history is lost on restart."""

    def __init__(self):
        self._data: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()

    def get(self, profile: str) -> Dict[str, str]:
        with self._lock:
            return dict(self._data.get(profile, {}))

    def put(self, profile: str, iso_day: str, card_name: str) -> None:
        with self._lock:
            self._data.setdefault(profile, {})[iso_day] = card_name

    def purge(self, profile: str, before_iso_day: Optional[str] = None) -> int:
        with self._lock:
            entries = self._data.get(profile, {})
            if before_iso_day is None:
                removed = len(entries)
                self._data.pop(profile, None)
                return removed
            stale = [day for day in entries if day < before_iso_day]
            for day in stale:
                del entries[day]
            return len(stale)


class JsonFileRecencyBackend(RecencyBackend):
    """
    JSON file backend with atomic writes.

    Document layout: {"<profile>": {"YYYY-MM-DD": "<card name>"}}.
    Uses a temporary file + atomic rename to ensure crash resistance.
    An unreadable or malformed document is treated as empty.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize JSON backend.

        Args:
            path: Path to JSON state file
        """
        self.path = Path(path)
        self._lock = threading.Lock()
        logger.debug(f"JsonFileRecencyBackend initialized with path: {self.path}")

    def _load(self) -> Dict[str, Dict[str, str]]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"[RECENCY] Corrupt recency file {self.path}, treating as empty: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"[RECENCY] Unexpected recency document type {type(data).__name__}, treating as empty")
            return {}
        return data

    def _save(self, data: Dict[str, Dict[str, str]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = str(self.path) + ".tmp"
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except OSError:
            # Clean up temp file on error
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

    def get(self, profile: str) -> Dict[str, str]:
        with self._lock:
            entries = self._load().get(profile, {})
        return dict(entries) if isinstance(entries, dict) else {}

    def put(self, profile: str, iso_day: str, card_name: str) -> None:
        with self._lock:
            data = self._load()
            entries = data.get(profile)
            if not isinstance(entries, dict):
                entries = {}
                data[profile] = entries
            entries[iso_day] = card_name
            self._save(data)

    def purge(self, profile: str, before_iso_day: Optional[str] = None) -> int:
        with self._lock:
            data = self._load()
            entries = data.get(profile)
            if not isinstance(entries, dict):
                return 0

            if before_iso_day is None:
                removed = len(entries)
                del data[profile]
            else:
                stale = [day for day in entries if str(day) < before_iso_day]
                for day in stale:
                    del entries[day]
                removed = len(stale)

            if removed:
                self._save(data)
            return removed
