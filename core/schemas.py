"""
Data Schemas

This module defines the Pydantic models used by the RSI monitor.

Models:
    - OHLC: Candlestick/Kline data normalized from Binance responses
    - RSICategory: The eight fixed RSI ranges
    - SymbolRSI: One symbol and its latest RSI value
    - CategorizedRSI: Symbols bucketed by RSI range (the API response)
    - MonitorRSIRequest: Request body of the monitor endpoint
"""

from datetime import datetime
from enum import Enum
from typing import List
from pydantic import BaseModel, Field, field_validator


# ============================================
# OHLC (Candlestick) Schema
# ============================================

class OHLC(BaseModel):
    """
    Open-High-Low-Close (Candlestick) Data Model

    Attributes:
        symbol: Trading pair in uppercase (e.g., "BTCUSDT")
        interval: Timeframe (e.g., "1h", "4h")
        timestamp: Candle opening time in UTC
        open: Opening price
        high: Highest price during the interval
        low: Lowest price during the interval
        close: Closing price (last trade in the interval)
        volume: Volume in base asset
        quote_volume: Volume in quote asset
        trades_count: Number of trades in the interval

    Example:
        >>> ohlc = OHLC(
        ...     symbol="BTCUSDT",
        ...     interval="1h",
        ...     timestamp=datetime(2024, 1, 1, 12, 0, 0),
        ...     open=50000.0,
        ...     high=51000.0,
        ...     low=49500.0,
        ...     close=50500.0,
        ...     volume=125.5,
        ...     quote_volume=6277500.0,
        ...     trades_count=1523,
        ... )
    """

    symbol: str = Field(..., description="Trading pair symbol in uppercase", examples=["BTCUSDT"])
    interval: str = Field(..., description="Candlestick interval", examples=["1h", "4h", "1d"])
    timestamp: datetime = Field(..., description="Candle open time in UTC")

    # Prices can be 0.0 on pairs with no trades in the interval
    open: float = Field(..., ge=0)
    high: float = Field(..., ge=0)
    low: float = Field(..., ge=0)
    close: float = Field(..., ge=0)

    volume: float = Field(..., ge=0)
    quote_volume: float = Field(..., ge=0)
    trades_count: int = Field(..., ge=0)

    @field_validator('symbol')
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        """Ensure symbol is uppercase"""
        return v.upper()


# ============================================
# RSI Schemas
# ============================================

class RSICategory(str, Enum):
    """RSI ranges; keys match the response object of the monitor endpoint."""

    BELOW_20 = "below20"
    BETWEEN_20_30 = "between20and30"
    BETWEEN_30_40 = "between30and40"
    BETWEEN_40_50 = "between40and50"
    BETWEEN_50_60 = "between50and60"
    BETWEEN_60_70 = "between60and70"
    BETWEEN_70_80 = "between70and80"
    ABOVE_80 = "above80"


class SymbolRSI(BaseModel):
    """Latest RSI reading for one trading pair."""

    symbol: str = Field(..., description="Trading pair", examples=["BTCUSDT"])
    rsi: float = Field(..., ge=0, le=100, description="Latest RSI value")


class CategorizedRSI(BaseModel):
    """
    Trading pairs grouped by RSI range.

    All eight categories are always present; empty ranges are empty lists.
    Order inside a category follows the order in which symbols completed.
    """

    below20: List[SymbolRSI] = Field(default_factory=list)
    between20and30: List[SymbolRSI] = Field(default_factory=list)
    between30and40: List[SymbolRSI] = Field(default_factory=list)
    between40and50: List[SymbolRSI] = Field(default_factory=list)
    between50and60: List[SymbolRSI] = Field(default_factory=list)
    between60and70: List[SymbolRSI] = Field(default_factory=list)
    between70and80: List[SymbolRSI] = Field(default_factory=list)
    above80: List[SymbolRSI] = Field(default_factory=list)

    def add(self, category: RSICategory, entry: SymbolRSI) -> None:
        """Append an entry to the list of the given category."""
        getattr(self, RSICategory(category).value).append(entry)

    def get(self, category: RSICategory) -> List[SymbolRSI]:
        return getattr(self, RSICategory(category).value)

    def total(self) -> int:
        """Number of symbols across all categories."""
        return sum(len(self.get(category)) for category in RSICategory)


class MonitorRSIRequest(BaseModel):
    """Body of POST /api/monitorRSI."""

    timeframe: str = Field(..., description="Kline interval", examples=["1h", "4h"])

    @field_validator('timeframe')
    @classmethod
    def validate_timeframe(cls, v: str) -> str:
        """Reject empty or blank intervals"""
        v = v.strip()
        if not v:
            raise ValueError("timeframe must not be empty")
        return v
