"""Single-file trade store backed by a journal JSON snapshot.

The file holds one snapshot per owner::

    {"owners": {"local": {"trades": [...], "config": {...}}}}

Writes go to a temporary file that then replaces the original, so a
failed write never leaves a truncated snapshot.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from edgelog.core.config import TagConfig
from edgelog.core.errors import StoreError
from edgelog.core.models import Trade
from edgelog.ingest.snapshot import JournalSnapshot
from edgelog.journal.equity import newest_first

logger = logging.getLogger(__name__)


class JsonSnapshotStore:
    """:class:`~edgelog.core.interfaces.ITradeStore` over one JSON file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------ #
    # File access                                                          #
    # ------------------------------------------------------------------ #

    def _read(self) -> dict[str, JournalSnapshot]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return {
                owner: JournalSnapshot.model_validate(data)
                for owner, data in raw.get("owners", {}).items()
            }
        except (OSError, json.JSONDecodeError, ValidationError, AttributeError) as exc:
            raise StoreError(f"Cannot read trade snapshot {self._path}: {exc}") from exc

    def _write(self, owners: dict[str, JournalSnapshot]) -> None:
        document = {
            "owners": {owner: snap.model_dump(mode="json") for owner, snap in owners.items()},
        }
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(document, indent=2), encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            raise StoreError(f"Cannot write trade snapshot {self._path}: {exc}") from exc

    # ------------------------------------------------------------------ #
    # ITradeStore                                                          #
    # ------------------------------------------------------------------ #

    def list_trades(self, owner_id: str) -> list[Trade]:
        snapshot = self._read().get(owner_id)
        return newest_first(snapshot.trades) if snapshot else []

    def upsert_trade(self, owner_id: str, trade: Trade) -> Trade:
        owners = self._read()
        snapshot = owners.get(owner_id) or JournalSnapshot()
        trades = [t for t in snapshot.trades if t.id != trade.id]
        owners[owner_id] = snapshot.model_copy(update={"trades": [trade, *trades]})
        self._write(owners)
        logger.debug("Saved trade %s to %s", trade.id, self._path)
        return trade

    def delete_trade(self, owner_id: str, trade_id: str) -> None:
        owners = self._read()
        snapshot = owners.get(owner_id)
        if snapshot is None:
            return
        owners[owner_id] = snapshot.model_copy(
            update={"trades": [t for t in snapshot.trades if t.id != trade_id]},
        )
        self._write(owners)

    def save_collection(
        self,
        owner_id: str,
        trades: Iterable[Trade],
        removed_ids: Iterable[str] = (),
    ) -> int:
        """Delete *removed_ids* and upsert *trades* with a single file write."""
        trades = list(trades)
        removed = set(removed_ids)
        incoming = {t.id for t in trades}
        owners = self._read()
        snapshot = owners.get(owner_id) or JournalSnapshot()
        kept = [t for t in snapshot.trades if t.id not in removed and t.id not in incoming]
        owners[owner_id] = snapshot.model_copy(update={"trades": [*trades, *kept]})
        self._write(owners)
        logger.info("Stored %d trades for %s in %s", len(trades), owner_id, self._path)
        return len(trades)

    # ------------------------------------------------------------------ #
    # Tag vocabularies                                                     #
    # ------------------------------------------------------------------ #

    def load_config(self, owner_id: str) -> TagConfig:
        snapshot = self._read().get(owner_id)
        return snapshot.config if snapshot else TagConfig()

    def save_config(self, owner_id: str, config: TagConfig) -> None:
        owners = self._read()
        snapshot = owners.get(owner_id) or JournalSnapshot()
        owners[owner_id] = snapshot.model_copy(update={"config": config})
        self._write(owners)
