"""Trade export — CSV/JSON output of the journal.

Usage::

    exporter = TradeExporter()
    csv_str = exporter.to_csv(trades)
    json_str = exporter.to_json(trades)
"""

from __future__ import annotations

import csv
import io
import json
import logging
from typing import Any

from edgelog.core.models import Trade

logger = logging.getLogger(__name__)

TAG_SEPARATOR = ";"

# Default CSV columns
_CSV_COLUMNS = [
    "id",
    "instrument",
    "direction",
    "time",
    "endTime",
    "pnl",
    "setup",
    "entry_note",
    "exit_note",
    "mistakes",
    "successes",
]


class TradeExporter:
    """Export trades to CSV/JSON.

    Parameters
    ----------
    tag_separator : str
        Joins multi-valued tag fields into one cell.  Default ``";"``.
    """

    def __init__(self, *, tag_separator: str = TAG_SEPARATOR) -> None:
        self._sep = tag_separator

    # ------------------------------------------------------------------ #
    # CSV Export                                                           #
    # ------------------------------------------------------------------ #

    def to_csv(
        self,
        trades: list[Trade],
        *,
        columns: list[str] | None = None,
    ) -> str:
        """Export trades as a CSV string with a header row.

        Quoting follows :mod:`csv` minimal quoting, so notes containing
        commas, quotes or newlines survive a round trip.
        """
        cols = columns or _CSV_COLUMNS
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=cols, extrasaction="ignore", lineterminator="\n")
        writer.writeheader()

        for trade in trades:
            row = self._trade_to_row(trade)
            writer.writerow({c: row.get(c, "") for c in cols})

        logger.debug("Exported %d trades to CSV", len(trades))
        return buf.getvalue()

    # ------------------------------------------------------------------ #
    # JSON Export                                                          #
    # ------------------------------------------------------------------ #

    def to_json(self, trades: list[Trade], *, indent: int = 2) -> str:
        """Export the flat CSV rows as a JSON list."""
        rows = [self._trade_to_row(t) for t in trades]
        return json.dumps(rows, indent=indent, default=str)

    # ------------------------------------------------------------------ #
    # Private helpers                                                      #
    # ------------------------------------------------------------------ #

    def _trade_to_row(self, trade: Trade) -> dict[str, Any]:
        return {
            "id": trade.id,
            "instrument": trade.instrument,
            "direction": trade.direction.value,
            "time": trade.open_time.isoformat(),
            "endTime": trade.close_time.isoformat(),
            "pnl": str(trade.realized_pnl),
            "setup": trade.setup,
            "entry_note": trade.notes.entry,
            "exit_note": trade.notes.exit,
            "mistakes": self._sep.join(trade.mistakes),
            "successes": self._sep.join(trade.successes),
        }
