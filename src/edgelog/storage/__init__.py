"""Trade persistence behind the :class:`ITradeStore` protocol."""

from __future__ import annotations

import logging

from edgelog.core.config import Settings
from edgelog.core.enums import StorageBackend
from edgelog.core.errors import CollaboratorError
from edgelog.core.interfaces import ITradeStore, OperationResult
from edgelog.core.models import Trade

from .json_store import JsonSnapshotStore
from .sql_store import SqlTradeStore

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Failed to save trade."

__all__ = ["JsonSnapshotStore", "SqlTradeStore", "open_store", "save_trade"]


def open_store(settings: Settings) -> ITradeStore:
    """Build the store selected by ``settings.storage.backend``."""
    cfg = settings.storage
    if cfg.backend == StorageBackend.JSON:
        return JsonSnapshotStore(cfg.snapshot_path)
    return SqlTradeStore(cfg.database_url)


def save_trade(store: ITradeStore, owner_id: str, trade: Trade) -> OperationResult:
    """Persist one trade; failures come back as a failed result.

    The caller's in-memory collection is never touched here, so on
    failure it is exactly as it was before the attempt.
    """
    try:
        saved = store.upsert_trade(owner_id, trade)
    except CollaboratorError as exc:
        logger.warning("Saving trade %s failed: %s", trade.id, exc)
        return OperationResult.failed(SAVE_FAILED_MESSAGE)
    return OperationResult.ok(saved)
