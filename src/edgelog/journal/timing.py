"""Bar-number lookup for reviewing entries against an intraday chart."""

from __future__ import annotations

from datetime import datetime, time, timezone, tzinfo

PRE_SESSION = "Pre"


def parse_session_start(text: str) -> time:
    """``"HH:MM"`` -> :class:`datetime.time`.  Raises ``ValueError`` if malformed."""
    hours, _, minutes = text.strip().partition(":")
    return time(int(hours), int(minutes or 0))


def bar_index(
    ts: datetime,
    session_start: str = "09:30",
    tf_minutes: int = 5,
    tz: tzinfo | None = None,
) -> int | str:
    """1-based number of the *tf_minutes* bar containing *ts*.

    Bars are counted from *session_start* on the same calendar day (in
    *tz*, UTC by default).  Timestamps before the session open return
    ``"Pre"``.
    """
    if tf_minutes <= 0:
        raise ValueError(f"tf_minutes must be positive, got {tf_minutes}")
    zone = tz or timezone.utc
    local = ts.astimezone(zone) if ts.tzinfo else ts.replace(tzinfo=zone)
    start = datetime.combine(local.date(), parse_session_start(session_start), tzinfo=zone)

    elapsed = (local - start).total_seconds()
    if elapsed < 0:
        return PRE_SESSION
    return int(elapsed // (tf_minutes * 60)) + 1
