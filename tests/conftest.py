"""Shared fixtures and builders for the edgelog test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from edgelog.core.config import Settings, TagConfig
from edgelog.core.enums import Direction, ExecutionRole, Side
from edgelog.core.models import AtomicExecution, ExecutionRecord, Trade

T0 = datetime(2024, 3, 4, 14, 30, tzinfo=timezone.utc)


@pytest.fixture
def base_time():
    return T0


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def tags():
    return TagConfig()


def make_execution(
    instrument: str = "NQ",
    side: str | Side = Side.BUY,
    price: float | str = 15000,
    quantity: float | str = 1,
    minutes: int = 0,
    pnl: float | str | None = None,
    base: datetime = T0,
) -> AtomicExecution:
    """Helper to create an AtomicExecution *minutes* after *base*."""
    return AtomicExecution(
        instrument=instrument,
        side=Side(side),
        price=Decimal(str(price)),
        quantity=Decimal(str(quantity)),
        timestamp=base + timedelta(minutes=minutes),
        realized_pnl_contribution=None if pnl is None else Decimal(str(pnl)),
    )


def make_trade(
    trade_id: str = "t1",
    pnl: float | str = 100,
    instrument: str = "NQ",
    direction: Direction = Direction.LONG,
    minutes: int = 0,
    setup: str = "",
    mistakes: list[str] | None = None,
    successes: list[str] | None = None,
    mindsets: list[str] | None = None,
    **extra,
) -> Trade:
    """Helper to create a closed one-lot Trade opened *minutes* after T0."""
    opened = T0 + timedelta(minutes=minutes)
    closed = opened + timedelta(minutes=15)
    open_side = Side.BUY if direction == Direction.LONG else Side.SELL
    close_side = Side.SELL if open_side == Side.BUY else Side.BUY
    sign = Decimal("1") if open_side == Side.BUY else Decimal("-1")
    executions = [
        ExecutionRecord(
            instrument=instrument, side=open_side, price=Decimal("100"), quantity=Decimal("1"),
            timestamp=opened, role=ExecutionRole.OPEN, position_after=sign,
        ),
        ExecutionRecord(
            instrument=instrument, side=close_side, price=Decimal("101"), quantity=Decimal("1"),
            timestamp=closed, role=ExecutionRole.CLOSE, position_after=Decimal("0"),
        ),
    ]
    return Trade(
        id=trade_id,
        instrument=instrument,
        direction=direction,
        open_time=opened,
        close_time=closed,
        executions=executions,
        realized_pnl=Decimal(str(pnl)),
        setup=setup,
        mistakes=mistakes or [],
        successes=successes or [],
        mindsets=mindsets or [],
        **extra,
    )
