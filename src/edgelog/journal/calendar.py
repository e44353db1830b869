"""Daily P&L calendar."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timezone, tzinfo
from decimal import Decimal
from typing import Iterable

from edgelog.core.models import Trade


@dataclass
class DaySummary:
    day: date
    pnl: Decimal = Decimal("0")
    count: int = 0
    trade_ids: list[str] = field(default_factory=list)


def daily_summary(
    trades: Iterable[Trade],
    tz: tzinfo | None = None,
) -> dict[date, DaySummary]:
    """Bucket trades by the calendar date of ``open_time`` in *tz* (UTC default).

    Days come back in ascending order; days without trades are absent.
    """
    zone = tz or timezone.utc
    days: dict[date, DaySummary] = {}
    for trade in trades:
        day = trade.open_time.astimezone(zone).date()
        summary = days.setdefault(day, DaySummary(day=day))
        summary.pnl += trade.realized_pnl
        summary.count += 1
        summary.trade_ids.append(trade.id)
    return dict(sorted(days.items()))
