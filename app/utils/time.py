"""Time utility helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


def now_utc() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse a stored timestamp into an aware UTC datetime.

    Supabase returns ``timestamptz`` columns as ISO strings, sometimes with a
    trailing ``Z``. Naive values are assumed to already be UTC.
    """
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        parsed = value

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def hours_ago(hours: int, base: datetime | None = None) -> datetime:
    """Return the instant ``hours`` before ``base`` (or now)."""
    return (base or now_utc()) - timedelta(hours=hours)


def humanize_relative_time(timestamp: str | datetime | None, now: datetime | None = None) -> str:
    """Format a timestamp into compact relative form used by the live feed."""
    if not timestamp:
        return "new"

    value = parse_timestamp(timestamp)
    delta = (now or now_utc()) - value
    total_minutes = int(delta.total_seconds() // 60)
    if total_minutes < 1:
        return "now"
    if total_minutes < 60:
        return f"{total_minutes}m"

    total_hours = total_minutes // 60
    if total_hours < 24:
        return f"{total_hours}h"

    total_days = total_hours // 24
    return f"{total_days}d"
