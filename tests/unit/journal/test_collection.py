"""Tests for trade collection helpers."""

from decimal import Decimal

import pytest

from edgelog.core.errors import TradeNotFoundError
from edgelog.journal.collection import (
    delete_trade,
    find_trade,
    replace_all,
    sort_newest_first,
    upsert_trade,
)

from tests.conftest import make_trade


class TestCollection:
    def test_find(self):
        trades = [make_trade("a"), make_trade("b")]
        assert find_trade(trades, "b").id == "b"
        with pytest.raises(TradeNotFoundError) as exc_info:
            find_trade(trades, "zzz")
        assert exc_info.value.trade_id == "zzz"

    def test_upsert_replaces_in_place(self):
        trades = [make_trade("a"), make_trade("b")]
        edited = make_trade("a", setup="Scalp")
        updated = upsert_trade(trades, edited)
        assert [t.id for t in updated] == ["a", "b"]
        assert updated[0].setup == "Scalp"
        assert trades[0].setup == ""

    def test_upsert_adds_new_first(self):
        updated = upsert_trade([make_trade("a")], make_trade("b"))
        assert [t.id for t in updated] == ["b", "a"]

    def test_delete_recomputes_equity(self):
        trades = replace_all([
            make_trade("a", pnl=100), make_trade("b", pnl=50, minutes=5),
            make_trade("c", pnl=10, minutes=10),
        ])
        remaining = delete_trade(trades, "b")
        assert [t.id for t in remaining] == ["c", "a"]
        assert remaining[0].running_equity == Decimal("110")

    def test_delete_unknown_raises(self):
        with pytest.raises(TradeNotFoundError):
            delete_trade([make_trade("a")], "zzz")

    def test_sort_newest_first(self):
        trades = [make_trade("a"), make_trade("b", minutes=1)]
        assert [t.id for t in sort_newest_first(trades)] == ["b", "a"]
