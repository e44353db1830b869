"""Trade reconstruction — zero-to-zero grouping of atomic executions.

Executions are sorted globally by time (stable, so ties keep input
order), partitioned by instrument, and each partition is folded through
a small state machine:

* flat position + execution  -> a new trade opens (Buy = Long, Sell = Short)
* every execution is tagged Open / Add / Trim / Close from how it moves
  ``|position|`` and records the signed ``position_after``
* position back at exactly zero -> the trade is sealed; the next
  execution opens a fresh one

P&L comes from one of two sources.  Decomposed completed-trade
executions carry a reported contribution that is summed as it arrives.
Raw fills carry none, so once the trade is flat its P&L is
``(sell notional - buy notional) * contract multiplier``.

A trade that never returns to flat is still emitted (with the P&L it
has accumulated so far) so that every execution lands in exactly one
trade.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from edgelog.core.config import MultiplierConfig
from edgelog.core.enums import Direction, ExecutionRole, Side
from edgelog.core.ids import new_id
from edgelog.core.models import AtomicExecution, ExecutionRecord, Trade

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


def classify_role(
    index: int,
    position_before: Decimal,
    position_after: Decimal,
) -> ExecutionRole:
    """Role of the *index*-th execution of a trade."""
    if index == 0:
        return ExecutionRole.OPEN
    if position_after == 0:
        return ExecutionRole.CLOSE
    if abs(position_after) > abs(position_before):
        return ExecutionRole.ADD
    return ExecutionRole.TRIM


@dataclass
class _TradeBuilder:
    """Accumulator for the trade currently open in one partition."""

    instrument: str
    direction: Direction
    open_time: datetime
    close_time: datetime
    records: list[ExecutionRecord] = field(default_factory=list)
    position: Decimal = _ZERO
    reported_pnl: Decimal = _ZERO
    has_reported_pnl: bool = False

    @classmethod
    def opened_by(cls, ex: AtomicExecution) -> _TradeBuilder:
        return cls(
            instrument=ex.instrument,
            direction=Direction.LONG if ex.side == Side.BUY else Direction.SHORT,
            open_time=ex.timestamp,
            close_time=ex.timestamp,
        )

    def apply(self, ex: AtomicExecution) -> None:
        before = self.position
        self.position = before + ex.signed_quantity
        role = classify_role(len(self.records), before, self.position)
        self.records.append(ExecutionRecord(
            **ex.model_dump(),
            role=role,
            position_after=self.position,
        ))
        self.close_time = ex.timestamp
        if ex.realized_pnl_contribution is not None:
            self.reported_pnl += ex.realized_pnl_contribution
            self.has_reported_pnl = True

    @property
    def is_flat(self) -> bool:
        return self.position == 0

    def realized_pnl(self, multipliers: MultiplierConfig) -> Decimal:
        if self.has_reported_pnl:
            return self.reported_pnl
        if not self.is_flat:
            return _ZERO
        sells = sum((r.notional for r in self.records if r.side == Side.SELL), _ZERO)
        buys = sum((r.notional for r in self.records if r.side == Side.BUY), _ZERO)
        return (sells - buys) * multipliers.multiplier_for(self.instrument)

    def build(self, multipliers: MultiplierConfig) -> Trade:
        return Trade(
            id=new_id(),
            instrument=self.instrument,
            direction=self.direction,
            open_time=self.open_time,
            close_time=self.close_time,
            executions=self.records,
            realized_pnl=self.realized_pnl(multipliers),
        )


def partition_by_instrument(
    executions: Iterable[AtomicExecution],
) -> dict[str, list[AtomicExecution]]:
    """Sort by timestamp (stable) and group, preserving order within each group."""
    ordered = sorted(executions, key=lambda ex: ex.timestamp)
    partitions: dict[str, list[AtomicExecution]] = {}
    for ex in ordered:
        partitions.setdefault(ex.instrument, []).append(ex)
    return partitions


def reconstruct_partition(
    executions: Iterable[AtomicExecution],
    multipliers: MultiplierConfig,
) -> list[Trade]:
    """Fold one instrument's chronologically ordered executions into trades."""
    trades: list[Trade] = []
    current: _TradeBuilder | None = None

    for ex in executions:
        if current is None:
            current = _TradeBuilder.opened_by(ex)
        current.apply(ex)
        if current.is_flat:
            trades.append(current.build(multipliers))
            current = None

    if current is not None:
        logger.info(
            "%s: position still open (%s) after last execution",
            current.instrument, current.position,
        )
        trades.append(current.build(multipliers))

    return trades


def reconstruct_trades(
    executions: Iterable[AtomicExecution],
    multipliers: MultiplierConfig | None = None,
) -> list[Trade]:
    """Group atomic executions into zero-to-zero trades across all instruments.

    Returns trades grouped by instrument (first-seen order), each group
    in chronological order.  Running equity is left at zero; see
    :func:`edgelog.journal.equity.apply_equity_curve`.
    """
    table = multipliers or MultiplierConfig()
    partitions = partition_by_instrument(executions)

    trades: list[Trade] = []
    for instrument, group in partitions.items():
        built = reconstruct_partition(group, table)
        logger.debug("%s: %d executions -> %d trades", instrument, len(group), len(built))
        trades.extend(built)

    logger.info(
        "Reconstructed %d trades from %d instruments",
        len(trades), len(partitions),
    )
    return trades
