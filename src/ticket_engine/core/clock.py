"""
Clock Helpers
=============

Engine timestamps are timezone-aware. Naive values handed in by callers or
read back from storage are taken to be UTC.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a naive timestamp; aware timestamps pass through."""
    if value is None:
        return None
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value
