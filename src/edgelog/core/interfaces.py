"""Protocol interfaces for the journal's external collaborators.

The core never performs I/O itself.  Persistence, image hosting and
AI coaching sit behind these protocols so implementations can be
swapped (local snapshot, database, remote API) without changing callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Protocol, runtime_checkable

from .models import Trade


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one call across a collaborator boundary."""

    success: bool
    value: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, value: Any = None) -> OperationResult:
        return cls(success=True, value=value)

    @classmethod
    def failed(cls, error: str) -> OperationResult:
        return cls(success=False, error=error)


# ---------------------------------------------------------------------------
# Trade store
# ---------------------------------------------------------------------------

@runtime_checkable
class ITradeStore(Protocol):
    """Opaque key-value trade store.  Trades must round-trip losslessly."""

    def list_trades(self, owner_id: str) -> list[Trade]: ...

    def upsert_trade(self, owner_id: str, trade: Trade) -> Trade: ...

    def delete_trade(self, owner_id: str, trade_id: str) -> None: ...

    def save_collection(
        self,
        owner_id: str,
        trades: Iterable[Trade],
        removed_ids: Iterable[str] = (),
    ) -> int:
        """Remove *removed_ids* and upsert *trades* as one all-or-nothing write."""
        ...


# ---------------------------------------------------------------------------
# Image store
# ---------------------------------------------------------------------------

@runtime_checkable
class IImageStore(Protocol):
    """Stores chart image blobs and returns a retrievable reference."""

    def put_image(self, trade_id: str, blob: bytes, content_type: str = "image/png") -> str: ...


# ---------------------------------------------------------------------------
# AI coach
# ---------------------------------------------------------------------------

@runtime_checkable
class ITradeCoach(Protocol):
    """Black-box text generation: takes a trade payload, returns prose."""

    def analyze(self, trade: dict[str, Any], context: str = "") -> str: ...
