"""
Binance Spot REST API Client

This module provides an async HTTP client for the public Binance spot REST API.
It handles:
- HTTP requests with retry logic
- Rate limit handling (429, 418, 503 errors)
- Error handling and logging
- Data normalization to our schemas

API Documentation:
    https://binance-docs.github.io/apidocs/spot/en/

Usage:
    async with BinanceAPIClient() as client:
        symbols = await client.get_trading_symbols("USDT")
        closes = await client.get_closing_prices("BTCUSDT", "1h", limit=50)
"""

import aiohttp
import asyncio
from typing import List, Dict, Optional, Any
from core.config import settings
from core.errors import UpstreamError
from core.logging import get_logger, log_api_request, log_api_response
from core.utils.time import ms_to_utc_datetime
from core.schemas import OHLC


class BinanceAPIClient:
    """
    Async HTTP client for the Binance spot REST API

    Attributes:
        base_url: Binance spot API base URL
        session: aiohttp ClientSession for HTTP requests
        timeout: Per-request timeout in seconds
        max_retries: Attempts per request on rate limits and transport errors
        retry_delay: Base backoff delay in seconds (multiplied by the attempt number)

    Example:
        >>> async with BinanceAPIClient() as client:
        ...     closes = await client.get_closing_prices("BTCUSDT", "1h")
        ...     print(f"Fetched {len(closes)} closes")

    Notes:
        - Uses context manager for automatic session cleanup
        - No API key needed, every endpoint used here is public
        - All failures surface as UpstreamError
    """

    MAX_KLINE_LIMIT = 1000  # Binance spot maximum

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_delay: float = 1.5
    ):
        self.base_url = (base_url or settings.binance_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.max_retries = max_retries if max_retries is not None else settings.max_retries
        self.retry_delay = retry_delay
        self.logger = get_logger(__name__)
        self.session: Optional[aiohttp.ClientSession] = None

    # ============================================
    # Context Manager for Session Management
    # ============================================

    async def __aenter__(self):
        self.session = aiohttp.ClientSession()
        self.logger.debug("BinanceAPIClient session created")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session if it is open."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.debug("BinanceAPIClient session closed")

    # ============================================
    # HTTP Request Handler with Retry Logic
    # ============================================

    async def _get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        attempts: Optional[int] = None
    ) -> Any:
        """
        Make GET request to Binance API with retry logic.

        Args:
            path: API endpoint path (e.g., "/api/v3/klines")
            params: Optional query parameters
            attempts: Number of tries (defaults to max_retries; 1 disables retry)

        Returns:
            Decoded JSON response

        Raises:
            RuntimeError: If the session was not opened with 'async with'
            UpstreamError: If the request fails after all attempts, or the API
                answers with a non-retryable error status

        Rate Limit Handling:
            429 (too many requests), 418 (IP banned), 503 (unavailable) and
            transport errors are retried after retry_delay * (attempt + 1).
            No delay follows the final attempt.
        """
        if not self.session:
            raise RuntimeError("Client session not initialized. Use 'async with' statement.")

        if attempts is None:
            attempts = self.max_retries
        url = f"{self.base_url}{path}"
        last_status: Optional[int] = None
        loop = asyncio.get_running_loop()

        for attempt in range(attempts):
            log_api_request("binance", path, params)
            started = loop.time()
            try:
                async with self.session.get(
                    url,
                    params=params,
                    timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as resp:
                    last_status = resp.status
                    log_api_response("binance", path, resp.status, loop.time() - started)

                    if resp.status == 200:
                        return await resp.json()

                    if resp.status in (429, 418, 503):
                        self.logger.warning(
                            f"Rate limited (HTTP {resp.status}) on {path} "
                            f"(attempt {attempt + 1}/{attempts})"
                        )
                        await self._backoff(attempt, attempts)
                        continue

                    # Client errors (bad symbol, bad interval) will not improve on retry
                    text = await resp.text()
                    self.logger.error(f"HTTP {resp.status} on {path}: {text}")
                    raise UpstreamError(
                        f"HTTP {resp.status} from {url}: {text}", path=path, status=resp.status
                    )

            except asyncio.TimeoutError:
                self.logger.error(f"Timeout on {path} (attempt {attempt + 1}/{attempts})")
                await self._backoff(attempt, attempts)

            except (aiohttp.ClientError, ValueError) as e:
                self.logger.error(f"Request failed on {path}: {e} (attempt {attempt + 1}/{attempts})")
                await self._backoff(attempt, attempts)

        raise UpstreamError(
            f"Failed to fetch {url} after {attempts} attempts", path=path, status=last_status
        )

    async def _backoff(self, attempt: int, attempts: int) -> None:
        if attempt < attempts - 1:
            await asyncio.sleep(self.retry_delay * (attempt + 1))

    # ============================================
    # API Methods
    # ============================================

    async def get_exchange_info(self) -> Dict[str, Any]:
        """
        Fetch exchange trading rules and symbol information.

        Binance Endpoint:
            GET /api/v3/exchangeInfo

        Response Format (abridged):
            {
              "timezone": "UTC",
              "symbols": [
                {"symbol": "ETHBTC", "status": "TRADING", "baseAsset": "ETH", "quoteAsset": "BTC", ...}
              ]
            }
        """
        self.logger.info("Fetching exchange info")
        data = await self._get("/api/v3/exchangeInfo")
        if not isinstance(data, dict) or not isinstance(data.get("symbols"), list):
            raise UpstreamError("Malformed exchangeInfo response", path="/api/v3/exchangeInfo")
        return data

    async def get_trading_symbols(self, quote_asset: str) -> List[str]:
        """
        List symbols that are currently trading and quoted in quote_asset.

        Args:
            quote_asset: Quote currency (e.g., "USDT")

        Returns:
            Symbol names in the order Binance lists them

        Example:
            >>> await client.get_trading_symbols("USDT")
            ['BTCUSDT', 'ETHUSDT', ...]
        """
        data = await self.get_exchange_info()
        quote_asset = quote_asset.upper()
        symbols = [
            s["symbol"]
            for s in data["symbols"]
            if (
                isinstance(s, dict)
                and s.get("status") == "TRADING"
                and s.get("quoteAsset") == quote_asset
                and s.get("symbol")
            )
        ]
        self.logger.info(f"Found {len(symbols)} trading {quote_asset} pairs")
        return symbols

    async def get_ohlc(self, symbol: str, interval: str, limit: int = 50) -> List[OHLC]:
        """
        Fetch the most recent candles for a symbol.

        Args:
            symbol: Trading pair (e.g., "BTCUSDT")
            interval: Candlestick interval (e.g., "1h", "4h", "1d")
            limit: Number of candles to fetch (max 1000, default 50)

        Returns:
            List of OHLC objects sorted by timestamp (oldest first)

        Raises:
            UpstreamError: If the request fails or a row cannot be parsed

        Binance Endpoint:
            GET /api/v3/klines

        Response Format:
            [
              [
                1499040000000,      // Open time
                "0.01634790",       // Open
                "0.80000000",       // High
                "0.01575800",       // Low
                "0.01577100",       // Close
                "148976.11427815",  // Volume
                1499644799999,      // Close time
                "2434.19055334",    // Quote asset volume
                308,                // Number of trades
                ...
              ]
            ]
        """
        params = {
            "symbol": symbol.upper(),
            "interval": interval,
            "limit": min(limit, self.MAX_KLINE_LIMIT)
        }

        self.logger.debug(f"Fetching OHLC: {symbol} {interval} (limit={limit})")

        # One attempt only; the aggregator skips a symbol whose fetch fails
        data = await self._get("/api/v3/klines", params, attempts=1)

        try:
            ohlc_list = [
                OHLC(
                    symbol=symbol,
                    interval=interval,
                    timestamp=ms_to_utc_datetime(item[0]),
                    open=float(item[1]),
                    high=float(item[2]),
                    low=float(item[3]),
                    close=float(item[4]),
                    volume=float(item[5]),
                    quote_volume=float(item[7]),
                    trades_count=int(item[8])
                )
                for item in data
            ]
        except (TypeError, ValueError, IndexError) as e:
            raise UpstreamError(f"Malformed kline data for {symbol}: {e}", path="/api/v3/klines")

        self.logger.debug(f"Fetched {len(ohlc_list)} OHLC candles for {symbol}")
        return ohlc_list

    async def get_closing_prices(self, symbol: str, interval: str, limit: int = 50) -> List[float]:
        """
        Fetch recent closing prices for a symbol, oldest first.

        Raises:
            UpstreamError: On any transport or parse failure
        """
        candles = await self.get_ohlc(symbol, interval, limit=limit)
        return [candle.close for candle in candles]
