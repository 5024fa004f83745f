"""Timestamp parsing and normalization helpers."""

from datetime import datetime, timezone
from typing import Annotated, Any, Optional

import pytz
from pydantic import AfterValidator


def local_timezone(name: str):
    return pytz.timezone(name)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to an aware UTC instant.

    Naive values are read back from SQLite and are already UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_iso_timestamp(value: Any, tz) -> Optional[datetime]:
    """Parse an ISO-8601 string into a UTC instant, or None when invalid.

    Strings without an offset are read in ``tz``, a pytz timezone.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    # fromisoformat accepts the Z designator only from Python 3.11
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = tz.localize(parsed)
    return parsed.astimezone(timezone.utc)


# Datetimes leave the API as aware UTC whatever the database hands back
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
