"""Date-range presets for the analytics views."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

PRESETS: dict[str, timedelta] = {
    "1 hour": timedelta(hours=1),
    "6 hours": timedelta(hours=6),
    "1 day": timedelta(days=1),
    "1 week": timedelta(weeks=1),
}
DEFAULT_PRESET = "1 day"
CUSTOM = "custom"


@dataclass(frozen=True)
class DateRange:
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    preset: str = DEFAULT_PRESET


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_range(
    preset: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> DateRange:
    """Turn a preset label or an explicit start/end into a concrete range.

    Explicit bounds win over the preset and mark the range as custom.
    An unknown preset falls back to the default one.
    """
    now = as_utc(now) if now else datetime.now(timezone.utc)

    if start is not None or end is not None or preset == CUSTOM:
        return DateRange(
            start=as_utc(start) if start else None,
            end=as_utc(end) if end else None,
            preset=CUSTOM,
        )

    label = preset if preset in PRESETS else DEFAULT_PRESET
    return DateRange(start=now - PRESETS[label], end=now, preset=label)
