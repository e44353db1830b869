"""Tests for zero-to-zero trade reconstruction."""

from decimal import Decimal

import pytest

from edgelog.core.config import MultiplierConfig, MultiplierRule
from edgelog.core.enums import Direction, ExecutionRole, Side
from edgelog.journal.reconstruct import (
    classify_role,
    partition_by_instrument,
    reconstruct_trades,
)

from tests.conftest import make_execution


class TestClassifyRole:
    @pytest.mark.parametrize("index,before,after,role", [
        (0, 0, 1, ExecutionRole.OPEN),
        (0, 0, -2, ExecutionRole.OPEN),
        (1, 1, 2, ExecutionRole.ADD),
        (1, -1, -3, ExecutionRole.ADD),
        (2, 3, 1, ExecutionRole.TRIM),
        (2, -3, -1, ExecutionRole.TRIM),
        (3, 1, 0, ExecutionRole.CLOSE),
    ])
    def test_roles(self, index, before, after, role):
        assert classify_role(index, Decimal(before), Decimal(after)) == role


class TestReconstructRaw:
    def test_long_round_trip(self):
        [trade] = reconstruct_trades([
            make_execution(side="Buy", price=15000),
            make_execution(side="Sell", price=15020, minutes=5),
        ])
        assert trade.direction == Direction.LONG
        assert trade.realized_pnl == Decimal("1000")
        assert trade.open_time < trade.close_time
        assert [e.role for e in trade.executions] == [ExecutionRole.OPEN, ExecutionRole.CLOSE]

    def test_short_round_trip(self):
        [trade] = reconstruct_trades([
            make_execution(instrument="ES", side="Sell", price=4500),
            make_execution(instrument="ES", side="Buy", price=4490, minutes=5),
        ])
        assert trade.direction == Direction.SHORT
        assert trade.realized_pnl == Decimal("500")

    def test_scale_in_scale_out(self):
        [trade] = reconstruct_trades([
            make_execution(instrument="CL", side="Buy", price=70, quantity=2),
            make_execution(instrument="CL", side="Buy", price=71, quantity=1, minutes=1),
            make_execution(instrument="CL", side="Sell", price=72, quantity=2, minutes=2),
            make_execution(instrument="CL", side="Sell", price=73, quantity=1, minutes=3),
        ])
        assert [e.role for e in trade.executions] == [
            ExecutionRole.OPEN, ExecutionRole.ADD, ExecutionRole.TRIM, ExecutionRole.CLOSE,
        ]
        assert [e.position_after for e in trade.executions] == [2, 3, 1, 0]
        # (144 + 73) - (140 + 71) = 6 points at 1000
        assert trade.realized_pnl == Decimal("6000")

    def test_flat_splits_trades(self):
        trades = reconstruct_trades([
            make_execution(side="Buy", price=100),
            make_execution(side="Sell", price=101, minutes=1),
            make_execution(side="Sell", price=102, minutes=2),
            make_execution(side="Buy", price=101, minutes=3),
        ])
        assert [t.direction for t in trades] == [Direction.LONG, Direction.SHORT]
        assert all(t.net_quantity == 0 for t in trades)
        assert len({t.id for t in trades}) == 2

    def test_instruments_are_independent(self):
        trades = reconstruct_trades([
            make_execution(instrument="NQ", side="Buy", price=100),
            make_execution(instrument="ES", side="Sell", price=50, minutes=1),
            make_execution(instrument="NQ", side="Sell", price=102, minutes=2),
            make_execution(instrument="ES", side="Buy", price=49, minutes=3),
        ])
        by_instrument = {t.instrument: t for t in trades}
        assert by_instrument["NQ"].realized_pnl == Decimal("100")
        assert by_instrument["ES"].realized_pnl == Decimal("50")

    def test_input_order_does_not_matter(self):
        executions = [
            make_execution(side="Sell", price=15020, minutes=5),
            make_execution(side="Buy", price=15000),
        ]
        [trade] = reconstruct_trades(executions)
        assert trade.executions[0].side == Side.BUY
        assert trade.realized_pnl == Decimal("1000")

    def test_open_position_is_still_emitted(self):
        [trade] = reconstruct_trades([
            make_execution(side="Buy", price=100, quantity=2),
            make_execution(side="Sell", price=105, quantity=1, minutes=1),
        ])
        assert trade.net_quantity == Decimal("1")
        assert trade.realized_pnl == Decimal("0")
        assert trade.executions[-1].role == ExecutionRole.TRIM

    def test_fill_through_zero_stays_in_one_trade(self):
        [trade] = reconstruct_trades([
            make_execution(side="Buy", price=100, quantity=1),
            make_execution(side="Sell", price=105, quantity=2, minutes=1),
            make_execution(side="Buy", price=103, quantity=1, minutes=2),
        ])
        assert trade.direction == Direction.LONG
        assert [e.position_after for e in trade.executions] == [1, -1, 0]
        assert [e.role for e in trade.executions] == [
            ExecutionRole.OPEN, ExecutionRole.TRIM, ExecutionRole.CLOSE,
        ]
        assert trade.realized_pnl == Decimal("350")

    def test_custom_multiplier_table(self):
        table = MultiplierConfig(rules=[MultiplierRule(pattern="GC", multiplier=Decimal("100"))])
        [trade] = reconstruct_trades([
            make_execution(instrument="GC", side="Buy", price=2000),
            make_execution(instrument="GC", side="Sell", price=2001, minutes=1),
        ], table)
        assert trade.realized_pnl == Decimal("100")

    def test_empty_input(self):
        assert reconstruct_trades([]) == []


class TestReconstructReported:
    def test_reported_pnl_sum_wins_over_prices(self):
        [trade] = reconstruct_trades([
            make_execution(instrument="ES", side="Buy", price=4500, pnl=0),
            make_execution(instrument="ES", side="Sell", price=4490, minutes=15, pnl=-500),
        ])
        assert trade.realized_pnl == Decimal("-500")

    def test_scaled_exits_sum_contributions(self):
        [trade] = reconstruct_trades([
            make_execution(side="Buy", quantity=1, pnl=0),
            make_execution(side="Buy", quantity=1, minutes=1, pnl=0),
            make_execution(side="Sell", quantity=1, minutes=2, pnl=200),
            make_execution(side="Sell", quantity=1, minutes=3, pnl=-50),
        ])
        assert trade.realized_pnl == Decimal("150")
        assert len(trade.executions) == 4


class TestPartition:
    def test_stable_ties_keep_input_order(self):
        first = make_execution(side="Buy", price=1)
        second = make_execution(side="Sell", price=2)
        partitions = partition_by_instrument([first, second])
        assert partitions["NQ"] == [first, second]


class TestMultipliers:
    @pytest.mark.parametrize("symbol,multiplier", [
        ("NQ", 50), ("NQH4", 50), ("ES", 50), ("MNQ", 5), ("mes", 5),
        ("CL", 1000), ("AAPL", 1), ("AAPL2", 1), ("GC", 1),
    ])
    def test_default_table(self, symbol, multiplier):
        assert MultiplierConfig().multiplier_for(symbol) == Decimal(multiplier)
