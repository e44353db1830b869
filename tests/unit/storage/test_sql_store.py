"""Tests for the SQLAlchemy trade store."""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from edgelog.core.errors import StoreError
from edgelog.core.interfaces import ITradeStore
from edgelog.core.models import Annotation, TradeNotes
from edgelog.storage.sql_store import SqlTradeStore

from tests.conftest import make_trade


@pytest.fixture
def store():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )
    return SqlTradeStore(engine=engine)


class TestSqlTradeStore:
    def test_satisfies_protocol(self, store):
        assert isinstance(store, ITradeStore)

    def test_full_round_trip(self, store):
        trade = make_trade(
            "a", pnl="-12.75", setup="Scalp", mistakes=["FOMO"], mindsets=["Tired"],
            notes=TradeNotes(entry="in", exit="out"),
            chart_image="charts/a.png",
            annotations=[Annotation(id=17, x=5, y=6, text="here", tag_type="mistake", tag_value="FOMO")],
        )
        store.upsert_trade("local", trade)
        assert store.list_trades("local") == [trade]

    def test_upsert_updates_existing(self, store):
        store.upsert_trade("local", make_trade("a", setup=""))
        store.upsert_trade("local", make_trade("a", setup="Breakout", pnl=5))
        [trade] = store.list_trades("local")
        assert trade.setup == "Breakout"
        assert trade.realized_pnl == Decimal("5")

    def test_owners_are_isolated(self, store):
        store.upsert_trade("alice", make_trade("a"))
        store.upsert_trade("bob", make_trade("a", pnl=1))
        assert [t.realized_pnl for t in store.list_trades("alice")] == [Decimal("100")]
        assert store.list_trades("carol") == []

    def test_newest_first(self, store):
        store.upsert_trade("local", make_trade("old"))
        store.upsert_trade("local", make_trade("new", minutes=30))
        assert [t.id for t in store.list_trades("local")] == ["new", "old"]

    def test_delete(self, store):
        store.upsert_trade("local", make_trade("a"))
        store.delete_trade("local", "a")
        store.delete_trade("local", "missing")
        assert store.list_trades("local") == []

    def test_database_errors_become_store_errors(self, store):
        with store.engine.begin() as conn:
            conn.exec_driver_sql("DROP TABLE trades")
        with pytest.raises(StoreError):
            store.list_trades("local")

    def test_save_collection_is_one_transaction(self, store):
        store.upsert_trade("local", make_trade("a"))
        store.upsert_trade("local", make_trade("b", minutes=5))
        merged = make_trade("m", pnl=200)
        assert store.save_collection("local", [merged], removed_ids=["a", "b"]) == 1
        assert store.list_trades("local") == [merged]

    def test_failed_collection_write_rolls_back(self, store, monkeypatch):
        store.upsert_trade("local", make_trade("a"))
        store.upsert_trade("local", make_trade("b", minutes=5))

        def _row_fails(owner_id, trade):
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr("edgelog.storage.sql_store.trade_to_row", _row_fails)
        with pytest.raises(StoreError):
            store.save_collection("local", [make_trade("m")], removed_ids=["a", "b"])
        assert [t.id for t in store.list_trades("local")] == ["b", "a"]

    def test_requires_url_or_engine(self):
        with pytest.raises(ValueError):
            SqlTradeStore()
