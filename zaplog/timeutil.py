"""Time conversion helpers."""

from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MICROSECOND = timedelta(microseconds=1)


def time_to_millis(t: datetime) -> int:
    """Milliseconds since the Unix epoch, truncated toward zero.

    Naive datetimes are taken to be in UTC.
    """
    if t.tzinfo is None:
        t = t.replace(tzinfo=timezone.utc)
    micros = (t - _EPOCH) // _MICROSECOND
    millis = abs(micros) // 1000
    return millis if micros >= 0 else -millis