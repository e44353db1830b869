"""Helpers over an in-memory trade collection.

Each returns a new list; the caller's collection is left as it was.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from edgelog.core.errors import TradeNotFoundError
from edgelog.core.models import Trade

from .equity import apply_equity_curve, newest_first


def sort_newest_first(trades: Iterable[Trade]) -> list[Trade]:
    return newest_first(trades)


def find_trade(trades: Iterable[Trade], trade_id: str) -> Trade:
    for trade in trades:
        if trade.id == trade_id:
            return trade
    raise TradeNotFoundError(trade_id)


def upsert_trade(trades: Sequence[Trade], trade: Trade) -> list[Trade]:
    """Replace the trade with the same id in place, or add it at the front.

    An edited trade keeps its position in the list.  P&L edits are not
    expected here, so running equity is left untouched.
    """
    if any(t.id == trade.id for t in trades):
        return [trade if t.id == trade.id else t for t in trades]
    return [trade, *trades]


def delete_trade(trades: Sequence[Trade], trade_id: str) -> list[Trade]:
    """Remove one trade and recompute running equity over the rest."""
    find_trade(trades, trade_id)
    remaining = [t for t in trades if t.id != trade_id]
    return newest_first(apply_equity_curve(remaining))


def replace_all(incoming: Iterable[Trade]) -> list[Trade]:
    """Adopt a freshly imported collection as the new journal contents."""
    return newest_first(apply_equity_curve(incoming))
