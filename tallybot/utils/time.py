from __future__ import annotations
from datetime import date, datetime
from typing import Optional
from ..config import LOCAL_TZ


def now_local() -> datetime:
    return datetime.now(tz=LOCAL_TZ)


def to_local(dt: datetime) -> datetime:
    """Naive local wall-clock time, truncated to whole seconds."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(LOCAL_TZ).replace(tzinfo=None)
    return dt.replace(microsecond=0)


def parse_day(s: str) -> Optional[date]:
    """ISO calendar date (YYYY-MM-DD) or None when malformed."""
    try:
        return datetime.strptime(s.strip(), "%Y-%m-%d").date()
    except (ValueError, AttributeError):
        return None
