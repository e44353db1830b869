"""Trade merge — fold several trades into one.

Used when one position was split across several trades (for example a
scaled exit the broker reported as separate round trips).  The oldest
selected trade is the base: its chart and annotations survive, its
notes lead each joined note field.

Execution roles and ``position_after`` values are carried over from the
source trades unchanged, so a merged execution list can show more than
one Close.  They are not recomputed because users may already have
reviewed them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from edgelog.core.errors import MergeError
from edgelog.core.ids import new_id
from edgelog.core.models import Trade, TradeNotes

from .equity import apply_equity_curve, chronological, newest_first

logger = logging.getLogger(__name__)

DEFAULT_NOTE_SEPARATOR = "\n---\n"
MIN_MERGE_SIZE = 2


@dataclass(frozen=True)
class MergeResult:
    """New collection (newest first) plus the merged trade, if any."""

    trades: list[Trade]
    merged: Trade | None = None

    @property
    def changed(self) -> bool:
        return self.merged is not None


def _union(groups: Iterable[list[str]]) -> list[str]:
    return list(dict.fromkeys(tag for group in groups for tag in group))


def _join_notes(trades: Sequence[Trade], separator: str) -> TradeNotes:
    def joined(name: str) -> str:
        return separator.join(
            text for t in trades if (text := getattr(t.notes, name))
        )

    return TradeNotes(
        entry=joined("entry"),
        exit=joined("exit"),
        mgmt=joined("mgmt"),
        general=joined("general"),
    )


def combine_trades(
    trades: Sequence[Trade],
    *,
    separator: str = DEFAULT_NOTE_SEPARATOR,
) -> Trade:
    """Build the single trade that replaces *trades* (two or more)."""
    if len(trades) < MIN_MERGE_SIZE:
        raise MergeError(f"Need at least {MIN_MERGE_SIZE} trades to merge, got {len(trades)}")

    ordered = sorted(trades, key=lambda t: t.open_time)
    base = ordered[0]
    executions = sorted(
        (ex for t in ordered for ex in t.executions),
        key=lambda ex: ex.timestamp,
    )

    return base.model_copy(update={
        "id": new_id(),
        "close_time": max(t.close_time for t in ordered),
        "realized_pnl": sum((t.realized_pnl for t in ordered), Decimal("0")),
        "executions": executions,
        "mistakes": _union(t.mistakes for t in ordered),
        "successes": _union(t.successes for t in ordered),
        "mindsets": _union(t.mindsets for t in ordered),
        "notes": _join_notes(ordered, separator),
        "chart_image": base.chart_image,
        "annotations": list(base.annotations),
    })


def merge_selected(
    trades: Sequence[Trade],
    trade_ids: Iterable[str],
    *,
    separator: str = DEFAULT_NOTE_SEPARATOR,
) -> MergeResult:
    """Replace the trades named by *trade_ids* with their merge.

    Fewer than two distinct ids is a no-op that returns the collection
    unchanged.  Ids missing from the collection raise
    :class:`MergeError`.  Running equity is recomputed over the whole
    resulting collection.
    """
    selected_ids = list(dict.fromkeys(trade_ids))
    if len(selected_ids) < MIN_MERGE_SIZE:
        logger.debug("Merge ignored: %d trade(s) selected", len(selected_ids))
        return MergeResult(trades=list(trades))

    by_id = {t.id: t for t in trades}
    missing = [tid for tid in selected_ids if tid not in by_id]
    if missing:
        raise MergeError(f"Cannot merge unknown trades: {', '.join(missing)}")

    selected = chronological(by_id[tid] for tid in selected_ids)
    merged = combine_trades(selected, separator=separator)
    chosen = set(selected_ids)
    remaining = [t for t in trades if t.id not in chosen]

    updated = newest_first(apply_equity_curve([*remaining, merged]))
    merged = next(t for t in updated if t.id == merged.id)

    logger.info(
        "Merged %d trades into %s (%s, pnl=%s)",
        len(selected), merged.id, merged.instrument, merged.realized_pnl,
    )
    return MergeResult(trades=updated, merged=merged)
