"""Custom exception hierarchy for the trade journal.

Aggregators never raise; these are only used at the loading, config and
export boundaries.
"""


class TradeJournalError(Exception):
    """Base exception for all trade journal errors."""


# --- Configuration ---
class ConfigError(TradeJournalError):
    """Invalid or missing configuration."""


# --- Data ---
class TradeRecordError(TradeJournalError):
    """A raw trade row failed validation."""

    def __init__(self, message: str, *, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


# --- Export ---
class ExportError(TradeJournalError):
    """Unsupported export format or unserializable report."""
