"""Full-state JSON snapshot: ``{"trades": [...], "config": {...}}``.

Snapshots are trusted as already reconstructed; loading validates the
shape but does not re-run reconstruction.  Anything that is not valid
JSON of that shape fails with :class:`SnapshotError` and no partial
result.
"""

from __future__ import annotations

import json
import logging
from typing import Iterable

from pydantic import BaseModel, Field, ValidationError

from edgelog.core.config import TagConfig
from edgelog.core.errors import SnapshotError
from edgelog.core.models import Trade

logger = logging.getLogger(__name__)


class JournalSnapshot(BaseModel):
    trades: list[Trade] = Field(default_factory=list)
    config: TagConfig = Field(default_factory=TagConfig)


def load_snapshot(text: str | bytes) -> JournalSnapshot:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"Snapshot is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object with a 'trades' array")
    try:
        snapshot = JournalSnapshot.model_validate(data)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid snapshot: {exc.error_count()} validation error(s)") from exc

    logger.info("Loaded snapshot with %d trades", len(snapshot.trades))
    return snapshot


def dump_snapshot(
    trades: Iterable[Trade],
    config: TagConfig | None = None,
    *,
    indent: int | None = 2,
) -> str:
    snapshot = JournalSnapshot(trades=list(trades), config=config or TagConfig())
    return snapshot.model_dump_json(indent=indent)
