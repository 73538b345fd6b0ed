from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

_TICK = timedelta(microseconds=1)

_lock = threading.Lock()
_last: datetime | None = None


def utc_now() -> datetime:
    """Timezone-aware UTC timestamp that strictly increases within this process.

    System clocks with coarse resolution can return the same value for two writes
    in a row; a later call is bumped by one microsecond past the previous result.
    """
    global _last
    now = datetime.now(timezone.utc)
    with _lock:
        if _last is not None and now <= _last:
            now = _last + _TICK
        _last = now
    return now


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite returns them without tzinfo)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
