"""
Exception hierarchy for the Daily Energy Engine.
"""


class OracleError(Exception):
    """Base class for engine errors."""


class DeckUnavailableError(OracleError):
    """Card catalog is missing or cannot be parsed."""


class CatalogDecodeError(DeckUnavailableError):
    """A catalog record is malformed."""

    def __init__(self, message: str, record_index=None):
        self.record_index = record_index
        if record_index is not None:
            message = f"record {record_index}: {message}"
        super().__init__(message)
