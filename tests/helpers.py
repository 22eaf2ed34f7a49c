"""
Test helpers: canned Binance rows and a manual clock.
"""

from typing import List


def make_kline(open_time: int, close: float) -> list:
    """Build one Binance kline row with the given close price."""
    return [
        open_time,
        str(close),
        str(close),
        str(close),
        str(close),
        "100.0",
        open_time + 3_599_999,
        str(close * 100.0),
        10,
        "50.0",
        str(close * 50.0),
        "0",
    ]


def make_klines(closes: List[float], start: int = 1_700_000_000_000) -> List[list]:
    """Build hourly kline rows, oldest first, from a list of closes."""
    return [make_kline(start + i * 3_600_000, close) for i, close in enumerate(closes)]


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
