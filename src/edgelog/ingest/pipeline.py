"""Import pipeline: CSV text in, journal-ready trades out.

Runs detection, normalization, reconstruction and the equity curve in
one call and reports the outcome as an :class:`ImportResult` instead of
raising, so callers can route an ``undetected`` file to manual mapping
and tell an empty file apart from an unrecognised one::

    result = import_text(text, settings)
    if result.status is ImportStatus.UNDETECTED:
        mapping = ColumnMapping.from_dict(ask_user(result.headers))
        result = import_mapped(text, mapping, settings)

Every log line emitted during one call carries the same ``import_id``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from edgelog.core.config import Settings
from edgelog.core.enums import FormatKind, ImportStatus
from edgelog.core.errors import EmptyImportError, FormatUndetectedError
from edgelog.core.ids import utc_now
from edgelog.core.models import AtomicExecution, Trade
from edgelog.journal.equity import apply_equity_curve, newest_first
from edgelog.journal.reconstruct import reconstruct_trades
from edgelog.observability.logger import import_scope

from .detect import CompletedTradeFormat, CompletedTradeRow, RawExecutionFormat, detect_format
from .mapping import ColumnMapping, resolve_mapping
from .normalize import normalize_completed_rows, normalize_raw_rows
from .tabular import parse_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import attempt.

    ``trades`` is newest first with running equity applied.  For an
    ``undetected`` result, ``headers`` and ``rows`` hold the parsed table
    to offer for manual mapping.
    """

    status: ImportStatus
    format: FormatKind
    trades: list[Trade] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)
    rows_read: int = 0
    executions_used: int = 0
    import_id: str = ""
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == ImportStatus.OK

    def raise_for_status(self) -> ImportResult:
        """Raise the matching :class:`IngestError` unless the import succeeded."""
        if self.status == ImportStatus.UNDETECTED:
            raise FormatUndetectedError(self.message)
        if self.status == ImportStatus.EMPTY:
            raise EmptyImportError(self.message)
        return self


def _finish(
    executions: list[AtomicExecution],
    *,
    kind: FormatKind,
    rows_read: int,
    import_id: str,
    settings: Settings,
) -> ImportResult:
    if not executions:
        logger.info("Import parsed %d rows but produced no usable executions", rows_read)
        return ImportResult(
            status=ImportStatus.EMPTY,
            format=kind,
            rows_read=rows_read,
            import_id=import_id,
            message="File parsed, but no valid trades were found.",
        )

    trades = reconstruct_trades(executions, settings.multipliers)
    trades = newest_first(apply_equity_curve(trades))
    logger.info(
        "Imported %d trades from %d executions (%s)",
        len(trades), len(executions), kind.value,
    )
    return ImportResult(
        status=ImportStatus.OK,
        format=kind,
        trades=trades,
        rows_read=rows_read,
        executions_used=len(executions),
        import_id=import_id,
        message=f"Imported {len(trades)} trades.",
    )


def _completed_executions(
    rows: list[CompletedTradeRow],
    settings: Settings,
    now: datetime | None,
) -> list[AtomicExecution]:
    return normalize_completed_rows(
        rows,
        fallback=settings.ingest.timestamp_fallback,
        now=now or utc_now(),
        multipliers=settings.multipliers,
    )


def import_text(
    text: str,
    settings: Settings | None = None,
    *,
    now: datetime | None = None,
) -> ImportResult:
    """Detect the format of *text* and reconstruct its trades.

    *now* overrides the processing instant used for unparsable
    timestamps (see :class:`~edgelog.core.enums.TimestampFallback`).
    """
    with import_scope() as import_id:
        return _import_text(text, settings or Settings(), now, import_id)


def _import_text(
    text: str,
    settings: Settings,
    now: datetime | None,
    import_id: str,
) -> ImportResult:
    if not text.strip():
        return ImportResult(
            status=ImportStatus.EMPTY,
            format=FormatKind.UNRESOLVED,
            import_id=import_id,
            message="File is empty.",
        )

    detected = detect_format(text)

    if isinstance(detected, CompletedTradeFormat):
        executions = _completed_executions(detected.rows, settings, now)
        return _finish(
            executions, kind=detected.kind, rows_read=len(detected.rows),
            import_id=import_id, settings=settings,
        )

    if isinstance(detected, RawExecutionFormat):
        executions = normalize_raw_rows(detected.rows)
        return _finish(
            executions, kind=detected.kind, rows_read=len(detected.rows),
            import_id=import_id, settings=settings,
        )

    return ImportResult(
        status=ImportStatus.UNDETECTED,
        format=detected.kind,
        headers=detected.headers,
        rows=detected.rows,
        rows_read=len(detected.rows),
        import_id=import_id,
        message="Could not detect the file format; map the columns manually.",
    )


def import_mapped(
    text: str,
    mapping: ColumnMapping,
    settings: Settings | None = None,
    *,
    now: datetime | None = None,
) -> ImportResult:
    """Import *text* through a user-supplied column mapping.

    Raises :class:`~edgelog.core.errors.MappingError` before anything
    is parsed into trades if the mapping is incomplete or names columns
    the file does not have.
    """
    settings = settings or Settings()
    with import_scope() as import_id:
        headers, rows = parse_table(text)
        completed = resolve_mapping(headers, rows, mapping)
        executions = _completed_executions(completed, settings, now)
        return _finish(
            executions, kind=FormatKind.COMPLETED_TRADE, rows_read=len(rows),
            import_id=import_id, settings=settings,
        )
