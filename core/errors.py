"""
Error Taxonomy

Exceptions raised by the RSI monitor. The orchestrator turns per-symbol
UpstreamError and InsufficientDataError into skips; anything else that
escapes a symbol task is wrapped in InternalError and fails the request.

    RSIMonitorError
    ├── UpstreamError          - network/API failure talking to Binance
    ├── InsufficientDataError  - not enough closing prices for the RSI period
    └── InternalError          - unexpected fault during aggregation
"""

from typing import Optional


class RSIMonitorError(RuntimeError):
    """Base class for all RSI monitor errors."""


class UpstreamError(RSIMonitorError):
    """
    Raised when the market-data provider cannot be reached or answers badly.

    Attributes:
        path: API path that failed (e.g., "/api/v3/klines")
        status: Last HTTP status received, None for transport errors
    """

    def __init__(self, message: str, path: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.status = status


class InsufficientDataError(RSIMonitorError, ValueError):
    """Raised when a price series is too short to compute the indicator."""

    def __init__(self, required: int, actual: int):
        super().__init__(f"RSI needs at least {required} closing prices, got {actual}")
        self.required = required
        self.actual = actual


class InternalError(RSIMonitorError):
    """Raised when aggregation fails for a reason other than upstream data."""
