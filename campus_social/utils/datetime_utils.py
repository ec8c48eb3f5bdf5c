# campus_social/utils/datetime_utils.py
from datetime import timezone


def to_naive_utc(dt):
    """Mongo hands datetimes back naive UTC; store them the same way."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)
