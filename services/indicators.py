"""
Relative Strength Index

Wilder-smoothed RSI over a series of closing prices.

The first average gain/loss is the mean of the first `period` price changes;
every later change updates them as avg = (avg * (period - 1) + x) / period.
RSI = 100 - 100 / (1 + avg_gain / avg_loss), and 100 when avg_loss is zero.
"""

from typing import Iterator, Sequence

import numpy as np

from core.errors import InsufficientDataError


def _rsi_array(closes: np.ndarray, period: int) -> np.ndarray:
    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    result = np.empty(len(deltas) - period + 1)

    avg_gain = np.mean(gains[:period])
    avg_loss = np.mean(losses[:period])
    result[0] = _rsi_value(avg_gain, avg_loss)

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i - period + 1] = _rsi_value(avg_gain, avg_loss)

    return result


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def _iter_values(values: np.ndarray) -> Iterator[float]:
    for value in values:
        yield float(value)


def rsi(prices: Sequence[float], period: int = 14) -> Iterator[float]:
    """
    Compute RSI values for a price series.

    Args:
        prices: Closing prices, oldest first (not modified)
        period: Lookback period

    Returns:
        Iterator yielding len(prices) - period values, oldest first

    Raises:
        ValueError: If period is not a positive integer
        InsufficientDataError: If fewer than period + 1 prices are given

    Example:
        >>> list(rsi([float(p) for p in range(1, 16)]))
        [100.0]
    """
    if not isinstance(period, int) or period <= 0:
        raise ValueError(f"period must be a positive integer, got {period!r}")
    if len(prices) < period + 1:
        raise InsufficientDataError(required=period + 1, actual=len(prices))

    # np.array copies, so later changes to prices don't leak in
    closes = np.array(prices, dtype=float)
    return _iter_values(_rsi_array(closes, period))


def latest_rsi(prices: Sequence[float], period: int = 14) -> float:
    """Return only the most recent RSI value of the series."""
    value = None
    for value in rsi(prices, period):
        pass
    return value
