"""AI coaching and chart upload boundaries.

The coach (:class:`ITradeCoach`) and the image host (:class:`IImageStore`)
are opaque collaborators.  This module prepares the trade payload and
turns collaborator failures into a failed :class:`OperationResult`
instead of an exception, leaving the trade untouched.
"""

from __future__ import annotations

import logging

from edgelog.core.interfaces import IImageStore, ITradeCoach, OperationResult
from edgelog.core.models import Trade

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to generate analysis."


def coaching_payload(trade: Trade, *, include_chart: bool = False) -> dict:
    """JSON-ready trade dict; the chart is only sent when asked for."""
    payload = trade.model_dump(mode="json")
    if not (include_chart and trade.chart_image):
        payload["chart_image"] = None
    return payload


def request_coaching(
    coach: ITradeCoach,
    trade: Trade,
    context: str = "",
    include_chart: bool = False,
) -> OperationResult:
    """Ask *coach* to review *trade*.  ``value`` is the returned text."""
    payload = coaching_payload(trade, include_chart=include_chart)
    try:
        text = coach.analyze(payload, context)
    except Exception as exc:
        logger.warning("Coaching failed for trade %s: %s", trade.id, exc)
        return OperationResult.failed(FAILURE_MESSAGE)
    return OperationResult.ok(text)


UPLOAD_FAILURE_MESSAGE = "Failed to upload chart image."


def attach_chart(
    images: IImageStore,
    trade: Trade,
    blob: bytes,
    content_type: str = "image/png",
) -> OperationResult:
    """Upload a chart through *images*.  ``value`` is the updated trade."""
    try:
        reference = images.put_image(trade.id, blob, content_type)
    except Exception as exc:
        logger.warning("Chart upload failed for trade %s: %s", trade.id, exc)
        return OperationResult.failed(UPLOAD_FAILURE_MESSAGE)
    return OperationResult.ok(trade.model_copy(update={"chart_image": reference}))
