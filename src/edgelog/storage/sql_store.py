"""Relational trade store (SQLite by default, any SQLAlchemy URL works).

Usage::

    store = SqlTradeStore("sqlite:///edgelog.db")
    store.upsert_trade("local", trade)
    trades = store.list_trades("local")
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator

from sqlalchemy import create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from edgelog.core.errors import StoreError
from edgelog.core.models import Trade

from .models import Base, TradeRow, trade_to_row

logger = logging.getLogger(__name__)


class SqlTradeStore:
    """:class:`~edgelog.core.interfaces.ITradeStore` over SQLAlchemy.

    Database errors surface as :class:`StoreError`; the session is
    rolled back so no partial write is left behind.
    """

    def __init__(self, url: str | None = None, *, engine: Engine | None = None, echo: bool = False) -> None:
        if engine is None:
            if url is None:
                raise ValueError("SqlTradeStore needs a database url or an engine")
            engine = create_engine(url, echo=echo)
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        Base.metadata.create_all(engine)
        logger.info("Trade store ready (%s)", engine.url.render_as_string(hide_password=True))

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Trade store operation failed: {exc}") from exc
        finally:
            session.close()

    # ------------------------------------------------------------------ #
    # ITradeStore                                                          #
    # ------------------------------------------------------------------ #

    def list_trades(self, owner_id: str) -> list[Trade]:
        """All trades of *owner_id*, newest first."""
        with self._session() as session:
            stmt = (
                select(TradeRow)
                .where(TradeRow.owner_id == owner_id)
                .order_by(TradeRow.open_time.desc(), TradeRow.id.desc())
            )
            rows = session.execute(stmt).scalars().all()
            return [row.to_trade() for row in rows]

    def upsert_trade(self, owner_id: str, trade: Trade) -> Trade:
        with self._session() as session:
            existing = session.get(TradeRow, (owner_id, trade.id))
            if existing is not None:
                existing.apply(trade)
                logger.debug("Updated trade %s", trade.id)
            else:
                session.add(trade_to_row(owner_id, trade))
                logger.debug("Inserted trade %s", trade.id)
        return trade

    def save_collection(
        self,
        owner_id: str,
        trades: Iterable[Trade],
        removed_ids: Iterable[str] = (),
    ) -> int:
        """Delete *removed_ids* and upsert *trades* in one transaction."""
        trades = list(trades)
        removed = set(removed_ids) - {t.id for t in trades}
        with self._session() as session:
            if removed:
                session.execute(
                    delete(TradeRow).where(
                        TradeRow.owner_id == owner_id, TradeRow.id.in_(removed),
                    )
                )
            for trade in trades:
                existing = session.get(TradeRow, (owner_id, trade.id))
                if existing is not None:
                    existing.apply(trade)
                else:
                    session.add(trade_to_row(owner_id, trade))
        logger.info(
            "Stored %d trades for %s (%d removed)", len(trades), owner_id, len(removed),
        )
        return len(trades)

    def delete_trade(self, owner_id: str, trade_id: str) -> None:
        with self._session() as session:
            session.execute(
                delete(TradeRow).where(
                    TradeRow.owner_id == owner_id, TradeRow.id == trade_id,
                )
            )
