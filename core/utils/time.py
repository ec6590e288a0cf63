"""
Time Utilities

Gate.io frames carry both a seconds field (`time`) and a milliseconds
field (`time_ms`); outbound requests must carry epoch milliseconds.
These helpers keep every timestamp in the application a timezone-aware
UTC datetime or an integer epoch value.
"""

from datetime import datetime, timezone
from typing import Any, Optional, Union


def to_utc_datetime(timestamp: Union[int, float]) -> datetime:
    """
    Convert a timestamp (seconds or milliseconds) to UTC datetime.

    Values above 1e12 are treated as milliseconds, anything else as seconds.

    Raises:
        ValueError: If timestamp is negative or out of range

    Examples:
        >>> to_utc_datetime(1704110400000)
        datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)
        >>> to_utc_datetime(1704110400)
        datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)
    """
    if timestamp < 0:
        raise ValueError(f"Timestamp cannot be negative: {timestamp}")

    if timestamp > 1e12:
        timestamp = timestamp / 1000.0

    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OSError, OverflowError, ValueError) as e:
        raise ValueError(f"Invalid timestamp: {timestamp}. Error: {e}")


def frame_timestamp(frame: dict) -> Optional[datetime]:
    """
    Extract the event time of a Gate.io frame, preferring `time_ms`.

    Returns None when the frame carries no usable timestamp.
    """
    raw: Any = frame.get("time_ms", frame.get("time"))
    if raw is None:
        return None
    try:
        return to_utc_datetime(float(raw))
    except (TypeError, ValueError):
        return None


def current_utc_timestamp(milliseconds: bool = False) -> int:
    """
    Get current UTC timestamp.

    Examples:
        >>> current_utc_timestamp()
        1704110400
        >>> current_utc_timestamp(milliseconds=True)
        1704110400000
    """
    now = datetime.now(timezone.utc).timestamp()
    return int(now * 1000) if milliseconds else int(now)
