"""Enumerations used across the journal."""

from enum import Enum


class Side(str, Enum):
    BUY = "Buy"
    SELL = "Sell"


class Direction(str, Enum):
    LONG = "Long"
    SHORT = "Short"


class ExecutionRole(str, Enum):
    """Effect of one execution on the running position."""

    OPEN = "Open"
    ADD = "Add"
    TRIM = "Trim"
    CLOSE = "Close"


class ExecutionSource(str, Enum):
    """Provenance of an atomic execution."""

    RAW = "raw_execution"            # One broker fill per input row
    DECOMPOSED = "decomposed_trade"  # Split out of a completed-trade row


class NoteCategory(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"
    MGMT = "mgmt"
    GENERAL = "general"


class TagType(str, Enum):
    """Tag an annotation may apply to its parent trade."""

    SETUP = "setup"
    MISTAKE = "mistake"
    SUCCESS = "success"
    MINDSET = "mindset"


class TagCategory(str, Enum):
    """Multi-valued tag fields on a trade."""

    MISTAKES = "mistakes"
    SUCCESSES = "successes"
    MINDSETS = "mindsets"


class FormatKind(str, Enum):
    COMPLETED_TRADE = "completed_trade"
    RAW_EXECUTION = "raw_execution"
    UNRESOLVED = "unresolved"


class ImportStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"            # Parsed, but nothing actionable
    UNDETECTED = "undetected"  # Route to manual mapping


class TimestampFallback(str, Enum):
    """Policy for completed-trade timestamps that fail to parse."""

    USE_PROCESSING_INSTANT = "use_processing_instant"
    DROP_ROW = "drop_row"


class StorageBackend(str, Enum):
    SQLITE = "sqlite"
    JSON = "json"
