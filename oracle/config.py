"""
Configuration management for the Daily Energy Engine.

Reads configuration from a .env file and environment variables with sensible defaults.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Default .env file location
DEFAULT_ENV_FILE = Path("/etc/oracle/oracle.env")

# Bundled 78-card catalog
DEFAULT_DECK_PATH = Path(__file__).resolve().parent / "deck" / "data" / "tarot_cards.json"

DEFAULT_RECENCY_PATH = Path.home() / ".oracle" / "recency.json"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

logger = logging.getLogger(__name__)


def _load_env_file():
    """Load environment variables from .env file if it exists."""
    env_file = os.getenv("ORACLE_ENV_FILE", str(DEFAULT_ENV_FILE))
    env_path = Path(env_file)

    if env_path.exists():
        load_dotenv(env_path, override=False)  # Don't override existing env vars


def _parse_retry_schedule(schedule_str: str) -> List[int]:
    """
    Parse store retry schedule from comma-separated string.

    Args:
        schedule_str: Comma-separated list of milliseconds (e.g., "50,100,200")

    Returns:
        List of retry delays in milliseconds

    Raises:
        ValueError: If parsing fails or values are invalid
    """
    if not schedule_str:
        raise ValueError("Retry schedule cannot be empty")

    try:
        delays = [int(x.strip()) for x in schedule_str.split(",")]
    except ValueError:
        raise ValueError(f"Invalid retry schedule format: {schedule_str} (must be comma-separated integers)")
    if any(d <= 0 for d in delays):
        raise ValueError("All retry delays must be positive")
    return delays


def _parse_bool(value: str) -> bool:
    return value.lower() in ("1", "true", "yes", "on")


@dataclass
class OracleConfig:
    """Engine configuration loaded from .env file and environment variables."""

    # Static card catalog
    deck_path: Path = DEFAULT_DECK_PATH

    # Recency persistence
    recency_path: Path = DEFAULT_RECENCY_PATH
    store_retry_ms: List[int] = field(default_factory=lambda: [50, 100, 200])

    # Selection
    commit_selections: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def load_config(cls) -> "OracleConfig":
        """
        Load configuration from environment variables.

        Returns:
            OracleConfig instance with loaded values

        Raises:
            ValueError: If configuration is invalid
        """
        # Load .env file first (if it exists)
        _load_env_file()

        deck_path = Path(os.getenv("ORACLE_DECK_PATH", str(DEFAULT_DECK_PATH))).expanduser()
        recency_path = Path(os.getenv("ORACLE_RECENCY_PATH", str(DEFAULT_RECENCY_PATH))).expanduser()

        store_retry_str = os.getenv("ORACLE_STORE_RETRY_MS", "50,100,200")
        try:
            store_retry_ms = _parse_retry_schedule(store_retry_str)
        except ValueError as e:
            raise ValueError(f"Invalid ORACLE_STORE_RETRY_MS: {e}")

        commit_selections = _parse_bool(os.getenv("ORACLE_COMMIT_SELECTIONS", "true"))

        log_level = os.getenv("ORACLE_LOG_LEVEL", "INFO").upper()
        log_file = os.getenv("ORACLE_LOG_FILE") or None

        config = cls(
            deck_path=deck_path,
            recency_path=recency_path,
            store_retry_ms=store_retry_ms,
            commit_selections=commit_selections,
            log_level=log_level,
            log_file=log_file,
        )

        # Validate configuration
        config.validate()

        return config

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level} (must be one of {', '.join(VALID_LOG_LEVELS)})")

        if not self.store_retry_ms:
            raise ValueError("Store retry schedule must contain at least one value")
        if any(d <= 0 for d in self.store_retry_ms):
            raise ValueError(f"Invalid store retry schedule: {self.store_retry_ms} (delays must be positive)")

        if not self.deck_path.exists():
            logger.warning(f"[CONFIG] Deck file not found at {self.deck_path}; selections will report NO_DECK")
