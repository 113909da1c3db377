"""
Date helpers for the clinic's local calendar.

Datetimes are persisted as UTC. Naive values coming from forms are wall-clock times
in the clinic's timezone (CLINIC_TIMEZONE).
"""

from datetime import datetime, time, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from clinica.core.config import settings


def clinic_tz() -> ZoneInfo:
    return ZoneInfo(settings.CLINIC_TIMEZONE)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to aware UTC, reading naive values as clinic-local time."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=clinic_tz())
    return value.astimezone(timezone.utc)


def as_aware(value: datetime) -> datetime:
    """Attach UTC to values read back naive (SQLite drops the offset)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def now_local() -> datetime:
    return datetime.now(clinic_tz())


def month_start(now: datetime) -> datetime:
    """First instant of the clinic-local month containing `now`, in UTC."""
    local = to_utc(now).astimezone(clinic_tz())
    start = local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return start.astimezone(timezone.utc)


def day_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """[start, end] of the clinic-local day containing `now`, in UTC."""
    local = to_utc(now).astimezone(clinic_tz())
    tz = clinic_tz()
    start = datetime.combine(local.date(), time.min, tzinfo=tz)
    end = datetime.combine(local.date(), time.max, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
