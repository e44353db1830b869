"""Running equity curve over a trade collection."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from edgelog.core.models import Trade


def chronological(trades: Iterable[Trade]) -> list[Trade]:
    """Oldest first by ``open_time``; ties resolve by id so order is input-independent."""
    return sorted(trades, key=lambda t: (t.open_time, t.id))


def newest_first(trades: Iterable[Trade]) -> list[Trade]:
    """Display order: most recently opened trade first."""
    return sorted(trades, key=lambda t: (t.open_time, t.id), reverse=True)


def apply_equity_curve(trades: Iterable[Trade]) -> list[Trade]:
    """Return copies of *trades* with ``running_equity`` set, oldest first.

    ``running_equity`` of the i-th trade (ascending ``open_time``) is
    the sum of ``realized_pnl`` over trades 0..i.  Idempotent.
    """
    running = Decimal("0")
    result: list[Trade] = []
    for trade in chronological(trades):
        running += trade.realized_pnl
        if trade.running_equity == running:
            result.append(trade)
        else:
            result.append(trade.model_copy(update={"running_equity": running}))
    return result
