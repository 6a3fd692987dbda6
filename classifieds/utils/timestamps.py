"""Server timestamps and their epoch-millisecond normalization."""

import threading
from datetime import datetime, timedelta, timezone

_lock = threading.Lock()
_last_issued = None


def server_timestamp():
    """Return a naive UTC timestamp, strictly increasing within the process.

    Two writes in the same microsecond would otherwise share a timestamp
    and make "newest first" ordering ambiguous.
    """
    global _last_issued

    now = datetime.now(timezone.utc).replace(tzinfo=None)
    with _lock:
        if _last_issued is not None and now <= _last_issued:
            now = _last_issued + timedelta(microseconds=1)
        _last_issued = now
    return now


def to_millis(value):
    """Normalize a stored timestamp to epoch milliseconds.

    Values that are already numbers pass through unchanged, None stays None.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def now_millis():
    """Local wall-clock time in epoch milliseconds (optimistic placeholder)."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)
