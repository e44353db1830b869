"""Performance statistics over a (filtered) trade collection.

Computes the headline numbers, per-tag P&L breakdowns, per-setup
metrics and setup/behaviour combination mining::

    stats = compute_statistics(TradeFilter(setup="Breakout").apply(trades), settings.tags)
    if stats is not None:
        print(stats.profit_factor, stats.best_combo)

Conventions:

* A trade is a winner when ``realized_pnl > 0``; everything else,
  break-even included, counts as a loser.
* Ratios never divide by zero.  With no losing P&L, profit factor is
  the gross win; with a zero average loss, the R ratio is the average win.
* An empty collection yields ``None`` rather than a row of zeros.

All money values are :class:`~decimal.Decimal`.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence

from edgelog.core.config import TagConfig
from edgelog.core.models import Trade

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
MIN_COMBO_COUNT = 2

# Combination label suffix per tag field.
COMBO_LABELS = {
    "mistakes": "Mistake",
    "successes": "Habit",
    "mindsets": "Mindset",
}


def _safe_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """numerator / denominator, or the numerator itself when denominator is 0."""
    if denominator == 0:
        return numerator
    return numerator / denominator


@dataclass
class _Bucket:
    """Win/loss accumulator for one group of trades."""

    count: int = 0
    wins: int = 0
    losses: int = 0
    gross_win: Decimal = _ZERO
    gross_loss: Decimal = _ZERO

    def record(self, trade: Trade) -> None:
        self.count += 1
        if trade.is_win:
            self.wins += 1
            self.gross_win += trade.realized_pnl
        else:
            self.losses += 1
            self.gross_loss += trade.realized_pnl

    @property
    def total_pnl(self) -> Decimal:
        return self.gross_win + self.gross_loss

    @property
    def win_rate(self) -> Decimal:
        return Decimal(self.wins) / Decimal(self.count) * _HUNDRED if self.count else _ZERO

    @property
    def profit_factor(self) -> Decimal:
        return _safe_ratio(abs(self.gross_win), abs(self.gross_loss))

    @property
    def expectancy(self) -> Decimal:
        return self.total_pnl / Decimal(self.count) if self.count else _ZERO

    @property
    def avg_win(self) -> Decimal:
        return self.gross_win / Decimal(self.wins) if self.wins else _ZERO

    @property
    def avg_loss(self) -> Decimal:
        return abs(self.gross_loss / Decimal(self.losses)) if self.losses else _ZERO


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BreakdownEntry:
    name: str
    value: Decimal


@dataclass(frozen=True)
class SetupMetrics:
    setup: str
    count: int
    win_rate: Decimal
    profit_factor: Decimal
    expectancy: Decimal
    pnl: Decimal


@dataclass(frozen=True)
class ComboStat:
    """One (setup, tag) pairing, e.g. ``"Breakout + FOMO (Mistake)"``."""

    name: str
    pnl: Decimal
    count: int
    expectancy: Decimal


@dataclass(frozen=True)
class TradeStatistics:
    total_pnl: Decimal
    win_rate: Decimal
    profit_factor: Decimal
    trade_count: int
    avg_win: Decimal
    avg_loss: Decimal
    r_ratio: Decimal
    expectancy: Decimal
    by_setup: list[BreakdownEntry] = field(default_factory=list)
    by_mistake: list[BreakdownEntry] = field(default_factory=list)
    by_success: list[BreakdownEntry] = field(default_factory=list)
    by_mindset: list[BreakdownEntry] = field(default_factory=list)
    setup_metrics: list[SetupMetrics] = field(default_factory=list)
    best_combo: ComboStat | None = None
    worst_combo: ComboStat | None = None


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------

def breakdown(trades: Iterable[Trade], category: str) -> list[BreakdownEntry]:
    """Sum P&L per tag value of *category* (``setup`` or a tag list field).

    A trade carrying N tags contributes its full P&L to each of the N
    buckets.  Empty tags are skipped.  Sorted by value, largest first.
    """
    totals: dict[str, Decimal] = {}
    for trade in trades:
        items = [trade.setup] if category == "setup" else trade.tags(category)
        for item in items:
            if not item:
                continue
            totals[item] = totals.get(item, _ZERO) + trade.realized_pnl
    entries = [BreakdownEntry(name=name, value=value) for name, value in totals.items()]
    return sorted(entries, key=lambda e: e.value, reverse=True)


def setup_metrics(trades: Sequence[Trade], setups: Iterable[str]) -> list[SetupMetrics]:
    """Metrics per configured setup, skipping setups without trades."""
    results: list[SetupMetrics] = []
    for setup in setups:
        bucket = _Bucket()
        for trade in trades:
            if trade.setup == setup:
                bucket.record(trade)
        if not bucket.count:
            continue
        results.append(SetupMetrics(
            setup=setup,
            count=bucket.count,
            win_rate=bucket.win_rate,
            profit_factor=bucket.profit_factor,
            expectancy=bucket.expectancy,
            pnl=bucket.total_pnl,
        ))
    return sorted(results, key=lambda m: m.expectancy, reverse=True)


def mine_combinations(trades: Iterable[Trade]) -> list[ComboStat]:
    """(setup, tag) pairings seen in at least two trades, best expectancy first."""
    pnl: dict[str, Decimal] = defaultdict(lambda: _ZERO)
    counts: dict[str, int] = defaultdict(int)
    for trade in trades:
        if not trade.setup:
            continue
        for category, label in COMBO_LABELS.items():
            for tag in trade.tags(category):
                key = f"{trade.setup} + {tag} ({label})"
                pnl[key] += trade.realized_pnl
                counts[key] += 1

    combos = [
        ComboStat(name=key, pnl=pnl[key], count=count, expectancy=pnl[key] / Decimal(count))
        for key, count in counts.items()
        if count >= MIN_COMBO_COUNT
    ]
    return sorted(combos, key=lambda c: c.expectancy, reverse=True)


def compute_statistics(
    trades: Iterable[Trade],
    tags: TagConfig | None = None,
) -> TradeStatistics | None:
    """Aggregate statistics for *trades*, or ``None`` when there are none."""
    trades = list(trades)
    if not trades:
        return None
    tags = tags or TagConfig()

    overall = _Bucket()
    for trade in trades:
        overall.record(trade)

    combos = mine_combinations(trades)
    return TradeStatistics(
        total_pnl=overall.total_pnl,
        win_rate=overall.win_rate,
        profit_factor=overall.profit_factor,
        trade_count=overall.count,
        avg_win=overall.avg_win,
        avg_loss=overall.avg_loss,
        r_ratio=_safe_ratio(overall.avg_win, overall.avg_loss),
        expectancy=overall.expectancy,
        by_setup=breakdown(trades, "setup"),
        by_mistake=breakdown(trades, "mistakes"),
        by_success=breakdown(trades, "successes"),
        by_mindset=breakdown(trades, "mindsets"),
        setup_metrics=setup_metrics(trades, tags.setups),
        best_combo=combos[0] if combos else None,
        worst_combo=combos[-1] if combos else None,
    )
