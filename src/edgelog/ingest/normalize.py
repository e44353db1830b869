"""Execution normalizer — typed rows to :class:`AtomicExecution`.

Two entry points, one per structured format.  Both drop rows they
cannot interpret instead of failing the import.

Completed-trade rows are *decomposed* into an opening and a closing
execution so the reconstructor can regroup scaled entries and exits
that the broker reported as separate rows.  The row's reported P&L
rides on the closing execution; the opening one carries zero.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from edgelog.core.config import MultiplierConfig
from edgelog.core.enums import ExecutionSource, Side, TimestampFallback
from edgelog.core.ids import utc_now
from edgelog.core.models import AtomicExecution

from .detect import CompletedTradeRow, RawExecutionRow
from .values import parse_decimal, parse_timestamp

logger = logging.getLogger(__name__)

UNKNOWN_INSTRUMENT = "Unknown"
_ZERO = Decimal("0")


def parse_side(text: str | None) -> Side:
    """Anything containing "buy" (any case) is a buy; everything else sells."""
    return Side.BUY if "buy" in (text or "").lower() else Side.SELL


def _is_long(text: str | None) -> bool:
    lowered = (text or "").lower()
    return "long" in lowered or "buy" in lowered


# ---------------------------------------------------------------------------
# Raw executions
# ---------------------------------------------------------------------------

def normalize_raw_rows(rows: Iterable[RawExecutionRow]) -> list[AtomicExecution]:
    """Convert one-fill-per-row input, dropping rows with bad numbers or dates."""
    executions: list[AtomicExecution] = []
    dropped = 0
    for row in rows:
        price = parse_decimal(row.price)
        qty = parse_decimal(row.quantity)
        ts = parse_timestamp(row.timestamp)
        if price is None or price < 0 or qty is None or qty <= 0 or ts is None:
            dropped += 1
            logger.debug("Dropped raw execution row: %s", row)
            continue
        executions.append(AtomicExecution(
            instrument=row.instrument,
            side=parse_side(row.side),
            price=price,
            quantity=qty,
            timestamp=ts,
            source=ExecutionSource.RAW,
        ))

    if dropped:
        logger.info("Raw import: %d rows dropped as unparsable", dropped)
    return executions


# ---------------------------------------------------------------------------
# Completed trades
# ---------------------------------------------------------------------------

def _resolve_time(
    text: str | None,
    fallback: TimestampFallback,
    now: datetime,
) -> datetime | None:
    ts = parse_timestamp(text)
    if ts is not None:
        return ts
    if fallback == TimestampFallback.USE_PROCESSING_INSTANT:
        logger.debug("Unparsable timestamp %r replaced by processing instant", text)
        return now
    return None


def decompose_completed_row(
    row: CompletedTradeRow,
    *,
    fallback: TimestampFallback = TimestampFallback.USE_PROCESSING_INSTANT,
    now: datetime | None = None,
    multipliers: MultiplierConfig | None = None,
) -> tuple[AtomicExecution, AtomicExecution] | None:
    """Split one completed-trade row into ``(opening, closing)`` executions.

    Returns ``None`` when the row has no positive size, a negative
    price, or (under :attr:`TimestampFallback.DROP_ROW`) a bad date.
    Unparsable prices read as zero.  When the P&L cell is blank the
    P&L is derived from the prices and the contract multiplier.
    """
    qty = parse_decimal(row.size)
    if qty is None or qty <= 0:
        return None

    now = now or utc_now()
    entry_time = _resolve_time(row.entered_at, fallback, now)
    exit_time = _resolve_time(row.exited_at, fallback, now)
    if entry_time is None or exit_time is None:
        return None

    entry_price = parse_decimal(row.entry_price)
    exit_price = parse_decimal(row.exit_price)
    if (entry_price is not None and entry_price < 0) or (
        exit_price is not None and exit_price < 0
    ):
        return None

    instrument = (row.contract_name or "").strip() or UNKNOWN_INSTRUMENT
    is_long = _is_long(row.type)

    pnl = parse_decimal(row.pnl)
    if pnl is None:
        if entry_price is not None and exit_price is not None:
            mult = (multipliers or MultiplierConfig()).multiplier_for(instrument)
            sign = 1 if is_long else -1
            pnl = (exit_price - entry_price) * qty * mult * sign
        else:
            pnl = _ZERO

    opening = AtomicExecution(
        instrument=instrument,
        side=Side.BUY if is_long else Side.SELL,
        price=entry_price if entry_price is not None else _ZERO,
        quantity=qty,
        timestamp=entry_time,
        realized_pnl_contribution=_ZERO,
        source=ExecutionSource.DECOMPOSED,
    )
    closing = AtomicExecution(
        instrument=instrument,
        side=Side.SELL if is_long else Side.BUY,
        price=exit_price if exit_price is not None else _ZERO,
        quantity=qty,
        timestamp=exit_time,
        realized_pnl_contribution=pnl,
        source=ExecutionSource.DECOMPOSED,
    )
    return opening, closing


def normalize_completed_rows(
    rows: Iterable[CompletedTradeRow],
    *,
    fallback: TimestampFallback = TimestampFallback.USE_PROCESSING_INSTANT,
    now: datetime | None = None,
    multipliers: MultiplierConfig | None = None,
) -> list[AtomicExecution]:
    """Decompose every completed-trade row into two atomic executions.

    *now* is the processing instant substituted for unparsable
    timestamps; it is captured once so every fallback in one import
    shares the same value.
    """
    now = now or utc_now()
    executions: list[AtomicExecution] = []
    dropped = 0
    for row in rows:
        pair = decompose_completed_row(
            row, fallback=fallback, now=now, multipliers=multipliers,
        )
        if pair is None:
            dropped += 1
            logger.debug("Dropped completed-trade row: %s", row)
            continue
        executions.extend(pair)

    if dropped:
        logger.info("Completed-trade import: %d rows dropped as unparsable", dropped)
    return executions
