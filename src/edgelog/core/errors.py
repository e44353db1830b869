"""Custom exception hierarchy for the trading journal."""


class JournalError(Exception):
    """Base exception for all journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


# --- Ingest ---
class IngestError(JournalError):
    """Import or parsing error."""


class FormatUndetectedError(IngestError):
    """File shape matches neither structured import path."""


class EmptyImportError(IngestError):
    """File parsed but yielded no usable rows."""


class MappingError(IngestError):
    """Manual column mapping is incomplete or refers to unknown columns."""

    def __init__(
        self,
        missing_fields: list[str],
        unknown_columns: list[str] | None = None,
        unknown_fields: list[str] | None = None,
    ):
        self.missing_fields = list(missing_fields)
        self.unknown_columns = list(unknown_columns or [])
        self.unknown_fields = list(unknown_fields or [])
        parts = []
        if self.missing_fields:
            parts.append("missing required fields: " + ", ".join(self.missing_fields))
        if self.unknown_columns:
            parts.append("unknown columns: " + ", ".join(self.unknown_columns))
        if self.unknown_fields:
            parts.append("unknown fields: " + ", ".join(self.unknown_fields))
        super().__init__("Invalid column mapping (" + "; ".join(parts) + ")")


class SnapshotError(IngestError):
    """JSON snapshot is not valid structured journal data."""


# --- Trades ---
class TradeNotFoundError(JournalError):
    """No trade with the requested id exists in the collection."""

    def __init__(self, trade_id: str):
        self.trade_id = trade_id
        super().__init__(f"Trade not found: {trade_id}")


class MergeError(JournalError):
    """Merge request refers to trades outside the collection."""


# --- Collaborators ---
class CollaboratorError(JournalError):
    """External collaborator (store, coach) failed."""


class StoreError(CollaboratorError):
    """Trade store read or write failure."""


class CoachError(CollaboratorError):
    """AI coach text generation failure."""
