"""
Binance Exchange Connector

Public Binance spot REST endpoints used by the RSI monitor:
    - GET /api/v3/exchangeInfo - Trading pair directory
    - GET /api/v3/klines - Historical candlestick data
"""

from .api_client import BinanceAPIClient

__all__ = ["BinanceAPIClient"]
