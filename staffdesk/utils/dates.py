from datetime import date, datetime, timezone
from typing import Optional


def as_datetime(value: Optional[date]) -> Optional[datetime]:
    """BSON has no date type; date-only values are stored as midnight datetimes."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Mongo hands back naive UTC datetimes
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
