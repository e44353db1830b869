"""Synthetic journal contents for trying the tool without a broker export."""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from decimal import Decimal

from edgelog.core.enums import Direction, ExecutionRole, ExecutionSource, Side
from edgelog.core.ids import utc_now
from edgelog.core.models import ExecutionRecord, Trade

from .equity import apply_equity_curve, newest_first

DEMO_INSTRUMENTS = ["NQ", "ES", "CL", "GC", "AAPL", "TSLA"]
DEMO_SETUPS = ["Trend Follow", "Breakout", "Reversal", "Scalp"]
DEMO_MINDSETS = ["Flow", "Focused", "Anxious", "Bored", "Tilted"]
WIN_PROBABILITY = 0.55
LOOKBACK_DAYS = 60


def _cents(value: float) -> Decimal:
    return Decimal(str(round(value, 2)))


def _demo_trade(rng: random.Random, index: int, now: datetime) -> Trade:
    is_win = rng.random() < WIN_PROBABILITY
    pnl = rng.uniform(100, 600) if is_win else -rng.uniform(50, 350)
    direction = Direction.LONG if rng.random() > 0.5 else Direction.SHORT
    opened = now - timedelta(days=rng.randrange(LOOKBACK_DAYS), minutes=rng.randrange(24 * 60))
    closed = opened + timedelta(minutes=30)
    entry = 15000 + rng.random() * 100
    favourable = 20 if is_win else -10
    exit_ = entry + favourable if direction == Direction.LONG else entry - favourable

    open_side = Side.BUY if direction == Direction.LONG else Side.SELL
    close_side = Side.SELL if open_side == Side.BUY else Side.BUY
    qty = Decimal("1")
    sign = qty if open_side == Side.BUY else -qty
    instrument = rng.choice(DEMO_INSTRUMENTS)
    executions = [
        ExecutionRecord(
            instrument=instrument, side=open_side, price=_cents(entry), quantity=qty,
            timestamp=opened, role=ExecutionRole.OPEN, position_after=sign,
            source=ExecutionSource.DECOMPOSED,
        ),
        ExecutionRecord(
            instrument=instrument, side=close_side, price=_cents(exit_), quantity=qty,
            timestamp=closed, role=ExecutionRole.CLOSE,
            position_after=Decimal("0"), source=ExecutionSource.DECOMPOSED,
            realized_pnl_contribution=_cents(pnl),
        ),
    ]
    return Trade(
        id=f"demo-{index}",
        instrument=instrument,
        direction=direction,
        open_time=opened,
        close_time=closed,
        executions=executions,
        realized_pnl=_cents(pnl),
        setup=rng.choice(DEMO_SETUPS),
        mistakes=["FOMO"] if not is_win and rng.random() > 0.6 else [],
        successes=["Patience"] if is_win else [],
        mindsets=[rng.choice(DEMO_MINDSETS)],
    )


def generate_demo_trades(
    count: int = 45,
    seed: int | None = None,
    now: datetime | None = None,
) -> list[Trade]:
    """*count* random closed trades over the last 60 days, newest first.

    Pass *seed* (and *now*) for reproducible output.
    """
    rng = random.Random(seed)
    now = now or utc_now()
    trades = [_demo_trade(rng, i, now) for i in range(count)]
    return newest_first(apply_equity_curve(trades))
