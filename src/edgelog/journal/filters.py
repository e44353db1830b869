"""Trade list filtering for the journal and statistics views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from edgelog.core.models import Trade

ALL = "All"


@dataclass(frozen=True)
class TradeFilter:
    """Simple conjunction of the journal's filter controls.

    ``text`` matches instrument or setup (case-insensitive substring);
    ``setup``/``side``/``outcome`` are exact, with ``"All"`` disabling
    the criterion.  ``outcome="Loss"`` includes break-even trades.
    """

    text: str = ""
    setup: str = ALL
    side: str = ALL
    outcome: str = ALL

    def matches(self, trade: Trade) -> bool:
        needle = self.text.lower()
        if needle and needle not in trade.instrument.lower() and needle not in trade.setup.lower():
            return False
        if self.setup != ALL and trade.setup != self.setup:
            return False
        if self.side != ALL and trade.direction.value != self.side:
            return False
        if self.outcome == "Win" and not trade.realized_pnl > 0:
            return False
        if self.outcome == "Loss" and trade.realized_pnl > 0:
            return False
        return True

    def apply(self, trades: Iterable[Trade]) -> list[Trade]:
        return [t for t in trades if self.matches(t)]
