"""Format detection for uploaded CSV text.

Inspects the header row and maps the file straight into one of three
typed shapes, so nothing downstream handles loosely keyed row dicts:

* :class:`CompletedTradeFormat` — one closed round trip per row
  (``ContractName`` + ``PnL`` headers present).
* :class:`RawExecutionFormat` — one fill per row, positional columns
  ``instrument, side, time, price, qty``.
* :class:`UnresolvedFormat` — anything else; offered to the user for
  manual column mapping.

Detection never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Union

from edgelog.core.enums import FormatKind

from .tabular import parse_table
from .values import parse_decimal, parse_timestamp

logger = logging.getLogger(__name__)

CONTRACT_COLUMN = "ContractName"
PNL_COLUMN = "PnL"
COMPLETED_TRADE_COLUMNS = (
    "ContractName",
    "Type",
    "Size",
    "EntryPrice",
    "ExitPrice",
    "EnteredAt",
    "ExitedAt",
    "PnL",
)
RAW_MIN_COLUMNS = 5


@dataclass(frozen=True)
class CompletedTradeRow:
    """A closed round trip as reported by the broker."""

    contract_name: str | None = None
    type: str | None = None
    size: str | None = None
    entry_price: str | None = None
    exit_price: str | None = None
    entered_at: str | None = None
    exited_at: str | None = None
    pnl: str | None = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, str | None]) -> CompletedTradeRow:
        """Build from a dict keyed by the canonical export column names."""
        return cls(
            contract_name=row.get("ContractName"),
            type=row.get("Type"),
            size=row.get("Size"),
            entry_price=row.get("EntryPrice"),
            exit_price=row.get("ExitPrice"),
            entered_at=row.get("EnteredAt"),
            exited_at=row.get("ExitedAt"),
            pnl=row.get("PnL"),
        )


@dataclass(frozen=True)
class RawExecutionRow:
    """One fill, still as text."""

    instrument: str
    side: str
    timestamp: str
    price: str
    quantity: str


@dataclass(frozen=True)
class CompletedTradeFormat:
    rows: list[CompletedTradeRow]
    kind: FormatKind = field(default=FormatKind.COMPLETED_TRADE, init=False)


@dataclass(frozen=True)
class RawExecutionFormat:
    rows: list[RawExecutionRow]
    kind: FormatKind = field(default=FormatKind.RAW_EXECUTION, init=False)


@dataclass(frozen=True)
class UnresolvedFormat:
    headers: list[str]
    rows: list[list[str]]
    kind: FormatKind = field(default=FormatKind.UNRESOLVED, init=False)


DetectedFormat = Union[CompletedTradeFormat, RawExecutionFormat, UnresolvedFormat]


def looks_like_execution(cols: list[str]) -> bool:
    """True if *cols* has a numeric price (col 3) and parseable time (col 2)."""
    return (
        len(cols) >= RAW_MIN_COLUMNS
        and parse_decimal(cols[3]) is not None
        and parse_timestamp(cols[2]) is not None
    )


def _time_like_header(headers: list[str]) -> bool:
    if any(h.lower() == "time" for h in headers):
        return True
    return len(headers) > 2 and "time" in headers[2].lower()


def detect_format(text: str) -> DetectedFormat:
    """Classify *text* and extract its rows in the matching typed shape."""
    headers, rows = parse_table(text)

    if CONTRACT_COLUMN in headers and PNL_COLUMN in headers:
        width = len(headers)
        trades = [
            CompletedTradeRow.from_mapping(dict(zip(headers, cols)))
            for cols in rows
            if len(cols) >= width
        ]
        logger.info(
            "Detected completed-trade format: %d/%d rows usable",
            len(trades), len(rows),
        )
        return CompletedTradeFormat(rows=trades)

    # Headerless exports are accepted when the first line is itself a fill.
    if len(headers) >= RAW_MIN_COLUMNS and (
        _time_like_header(headers) or looks_like_execution(headers)
    ):
        candidates = [cols for cols in [headers, *rows] if looks_like_execution(cols)]
        if candidates:
            logger.info(
                "Detected raw-execution format: %d/%d lines look like fills",
                len(candidates), len(rows) + 1,
            )
            return RawExecutionFormat(
                rows=[RawExecutionRow(*cols[:RAW_MIN_COLUMNS]) for cols in candidates]
            )

    logger.info("Format undetected (%d columns); manual mapping required", len(headers))
    return UnresolvedFormat(headers=headers, rows=rows)
