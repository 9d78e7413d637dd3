from oracle.state.recency_backend import InMemoryRecencyBackend, JsonFileRecencyBackend, RecencyBackend
from oracle.state.recency_store import RETENTION_DAYS, RecencyStore, as_day

__all__ = [
    "InMemoryRecencyBackend",
    "JsonFileRecencyBackend",
    "RETENTION_DAYS",
    "RecencyBackend",
    "RecencyStore",
    "as_day",
]
