"""SQLAlchemy ORM model for persisted journal trades.

The indexed columns exist for querying; the authoritative copy of each
trade is the JSON ``payload`` so that every field, executions and
annotations included, round-trips without loss.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, DateTime, Index, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from edgelog.core.ids import utc_now
from edgelog.core.models import Trade


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


class TradeRow(Base):
    """One journal trade owned by one user."""

    __tablename__ = "trades"

    owner_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    instrument: Mapped[str] = mapped_column(String(32), nullable=False)
    direction: Mapped[str] = mapped_column(String(8), nullable=False)
    open_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    close_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    realized_pnl: Mapped[Decimal] = mapped_column(Numeric(24, 8), default=Decimal("0"))
    running_equity: Mapped[Decimal] = mapped_column(Numeric(24, 8), default=Decimal("0"))
    setup: Mapped[str] = mapped_column(String(64), default="")
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now,
    )

    __table_args__ = (
        Index("ix_trades_owner_open_time", "owner_id", "open_time"),
        Index("ix_trades_instrument", "instrument"),
    )

    def __repr__(self) -> str:
        return f"<TradeRow(id={self.id!r}, owner={self.owner_id!r}, instrument={self.instrument!r})>"

    def apply(self, trade: Trade) -> None:
        """Copy *trade* into this row's columns."""
        self.instrument = trade.instrument
        self.direction = trade.direction.value
        self.open_time = trade.open_time
        self.close_time = trade.close_time
        self.realized_pnl = trade.realized_pnl
        self.running_equity = trade.running_equity
        self.setup = trade.setup
        self.payload = trade.model_dump(mode="json")

    def to_trade(self) -> Trade:
        return Trade.model_validate(self.payload)


def trade_to_row(owner_id: str, trade: Trade) -> TradeRow:
    row = TradeRow(owner_id=owner_id, id=trade.id)
    row.apply(trade)
    return row
