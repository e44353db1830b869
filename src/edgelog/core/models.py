"""Core domain models used across the journal.

These are the canonical "truth models" for the system.  Every import
path normalizes into :class:`AtomicExecution`; every reconstruction,
merge and edit produces :class:`Trade` instances.

Models are frozen.  Operations build replacements with
``model_copy(update=...)`` and never mutate lists in place, so a
caller's collection is never altered behind its back.

Validation accepts the camelCase keys used by older journal snapshots
(``time``, ``endTime``, ``pnl``, ``equityCurve``, ``posAfter`` ...)
alongside the canonical snake_case names.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field, field_validator

from .enums import (
    Direction,
    ExecutionRole,
    ExecutionSource,
    NoteCategory,
    Side,
    TagType,
)
from .ids import ensure_utc, new_id


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def _unique(values: list[str]) -> list[str]:
    """Drop duplicates, keeping first occurrence order."""
    return list(dict.fromkeys(values))


# ---------------------------------------------------------------------------
# Executions
# ---------------------------------------------------------------------------

class AtomicExecution(BaseModel):
    """One fill: a buy or sell of ``quantity`` at ``price``."""

    model_config = {"frozen": True, "populate_by_name": True}

    instrument: str
    side: Side
    price: Decimal = Field(ge=0)
    quantity: Decimal = Field(gt=0, validation_alias=_alias("quantity", "qty"))
    timestamp: datetime = Field(validation_alias=_alias("timestamp", "time"))
    realized_pnl_contribution: Decimal | None = Field(
        default=None,
        validation_alias=_alias("realized_pnl_contribution", "pnlContribution"),
    )
    source: ExecutionSource = ExecutionSource.RAW

    @field_validator("timestamp")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def signed_quantity(self) -> Decimal:
        """Buy contributes +qty, Sell contributes -qty."""
        return self.quantity if self.side == Side.BUY else -self.quantity

    @property
    def notional(self) -> Decimal:
        return self.price * self.quantity


class ExecutionRecord(AtomicExecution):
    """An execution as it sits inside a trade, with its positional role."""

    # Older snapshots store executions without the instrument.
    instrument: str = ""
    role: ExecutionRole = ExecutionRole.OPEN
    position_after: Decimal | None = Field(
        default=None, validation_alias=_alias("position_after", "posAfter"),
    )


# ---------------------------------------------------------------------------
# Annotations & notes
# ---------------------------------------------------------------------------

class Annotation(BaseModel):
    """A note pinned to a percentage position on the trade's chart."""

    model_config = {"frozen": True, "populate_by_name": True}

    id: str | int = Field(default_factory=new_id)
    x: float = Field(ge=0, le=100)
    y: float = Field(ge=0, le=100)
    text: str = ""
    category: NoteCategory = NoteCategory.GENERAL
    tag_type: TagType | None = Field(
        default=None, validation_alias=_alias("tag_type", "tagType"),
    )
    tag_value: str | None = Field(
        default=None, validation_alias=_alias("tag_value", "tagValue"),
    )

    @field_validator("tag_type", "tag_value", mode="before")
    @classmethod
    def _blank_is_none(cls, v):
        return v or None

    @property
    def applies_tag(self) -> bool:
        return self.tag_type is not None and bool(self.tag_value)


class TradeNotes(BaseModel):
    model_config = {"frozen": True}

    entry: str = ""
    exit: str = ""
    mgmt: str = ""
    general: str = ""


# ---------------------------------------------------------------------------
# Trade
# ---------------------------------------------------------------------------

class Trade(BaseModel):
    """One flat-to-flat position cycle in a single instrument."""

    model_config = {"frozen": True, "populate_by_name": True}

    id: str = Field(default_factory=new_id)
    instrument: str
    direction: Direction
    open_time: datetime = Field(validation_alias=_alias("open_time", "time"))
    close_time: datetime = Field(validation_alias=_alias("close_time", "endTime"))
    executions: list[ExecutionRecord] = Field(default_factory=list)
    realized_pnl: Decimal = Field(
        default=Decimal("0"), validation_alias=_alias("realized_pnl", "pnl"),
    )
    running_equity: Decimal = Field(
        default=Decimal("0"), validation_alias=_alias("running_equity", "equityCurve"),
    )

    # Journal annotations
    setup: str = ""
    mistakes: list[str] = Field(default_factory=list)
    successes: list[str] = Field(default_factory=list)
    mindsets: list[str] = Field(default_factory=list)
    notes: TradeNotes = Field(default_factory=TradeNotes)
    chart_image: str | None = Field(
        default=None, validation_alias=_alias("chart_image", "chartImage"),
    )
    annotations: list[Annotation] = Field(default_factory=list)

    @field_validator("open_time", "close_time")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_validator("mistakes", "successes", "mindsets")
    @classmethod
    def _dedupe(cls, v: list[str]) -> list[str]:
        return _unique(v)

    @field_validator("setup", mode="before")
    @classmethod
    def _null_setup(cls, v):
        return v or ""

    @property
    def is_win(self) -> bool:
        return self.realized_pnl > 0

    @property
    def net_quantity(self) -> Decimal:
        """Signed sum of all execution quantities (0 for a closed trade)."""
        return sum((e.signed_quantity for e in self.executions), Decimal("0"))

    def tags(self, category: str) -> list[str]:
        return list(getattr(self, category))
