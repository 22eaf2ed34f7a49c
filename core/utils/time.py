"""
Time Utilities

Binance kline open times are milliseconds since the Unix epoch.
"""

from datetime import datetime, timezone


def ms_to_utc_datetime(ms: int) -> datetime:
    """
    Convert epoch milliseconds to a timezone-aware UTC datetime.

    Raises:
        ValueError: If ms is negative or out of range

    Example:
        >>> ms_to_utc_datetime(1704110400000)
        datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)
    """
    if ms < 0:
        raise ValueError(f"Timestamp cannot be negative: {ms}")
    try:
        return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    except (OSError, OverflowError) as e:
        raise ValueError(f"Invalid timestamp: {ms}. Error: {e}")
