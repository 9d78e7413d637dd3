"""
Daily seed generation.

Seeds are stable across processes and machines: they come from SHA-256 of
the inputs, never from a random number generator.
"""

import hashlib
from datetime import datetime, timezone

from oracle.state.recency_store import DayLike, as_day

SEED_HEX_DIGITS = 8


def int_seed(text: str) -> int:
    """Deterministic integer seed: first 8 hex digits of SHA-256(text)."""
    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
    return int(digest[:SEED_HEX_DIGITS], 16)


def daily_seed(profile: str, day: DayLike = None) -> int:
    """Seed for one profile on one calendar day ("<profile>_YYYYMMDD")."""
    return int_seed(f"{profile}_{as_day(day).strftime('%Y%m%d')}")


def birth_profile_key(birth: datetime, latitude: float, longitude: float) -> str:
    """
    Stable profile key from birth details, for callers without a profile id.

    Naive datetimes are taken as UTC.
    """
    if birth.tzinfo is None:
        birth = birth.replace(tzinfo=timezone.utc)
    birth_utc = birth.astimezone(timezone.utc)
    return f"{birth_utc.strftime('%Y-%m-%d_%H:%M')}_{latitude:.4f}_{longitude:.4f}"
