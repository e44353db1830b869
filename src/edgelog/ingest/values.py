"""Lenient cell parsing shared by detection and normalization.

Both helpers return ``None`` for anything they cannot interpret so
callers can drop the row instead of aborting the import.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from dateutil import parser as date_parser

from edgelog.core.ids import ensure_utc

# Larger magnitudes overflow the default decimal context once multiplied.
MAX_DECIMAL_EXPONENT = 18


def parse_decimal(text: str | None) -> Decimal | None:
    """Parse a numeric cell such as ``"15020"``, ``"$1,250.50"`` or ``"(500)"``."""
    if text is None:
        return None
    cleaned = text.strip().replace("$", "").replace(",", "")
    negative = cleaned.startswith("(") and cleaned.endswith(")")
    if negative:
        cleaned = cleaned[1:-1]
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite() or value.adjusted() > MAX_DECIMAL_EXPONENT:
        return None
    return -value if negative else value


def parse_timestamp(text: str | None) -> datetime | None:
    """Parse a date/time cell into a UTC datetime.

    Bare 10- or 13-digit integers are read as epoch seconds or
    milliseconds.  Naive values are taken as UTC.
    """
    if text is None:
        return None
    cleaned = text.strip()
    if not cleaned:
        return None
    if cleaned.isdigit() and len(cleaned) in (10, 13):
        seconds = int(cleaned) / (1000 if len(cleaned) == 13 else 1)
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    try:
        return ensure_utc(date_parser.parse(cleaned))
    except (ValueError, OverflowError):
        return None
