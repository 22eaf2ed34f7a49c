"""
RSI Monitor

Fans out over every eligible trading pair, fetches its recent closes,
computes the latest RSI and buckets the pair into one of eight RSI ranges.

Per-symbol failures (upstream errors, too little data, timeouts) drop the
symbol from the result and are logged. The fan-out is bounded by a semaphore
and each symbol has its own time budget, so one hung request cannot stall
the whole response. Task results are merged after the batch settles; no task
writes to the shared result.
"""

import asyncio
from typing import List, Optional, Tuple

from core.errors import InsufficientDataError, InternalError, UpstreamError
from core.logging import get_logger
from core.schemas import CategorizedRSI, RSICategory, SymbolRSI
from exchanges.binance import BinanceAPIClient
from services.classifier import classify
from services.indicators import latest_rsi
from services.symbol_directory import SymbolDirectory

Classified = Tuple[RSICategory, SymbolRSI]

# Values are reported and classified at two decimals
RSI_DECIMALS = 2


class RSIMonitor:
    """
    Aggregates latest RSI values across all eligible trading pairs.

    Args:
        directory: Source of the trading pairs to scan
        client: Open BinanceAPIClient used for klines
        kline_limit: Candles fetched per symbol
        rsi_period: RSI lookback period
        min_closing_prices: Shorter series are skipped before computing RSI
        max_concurrency: Maximum symbols in flight at once
        symbol_timeout: Seconds allowed per symbol

    Example:
        >>> monitor = RSIMonitor(directory, client)
        >>> result = await monitor.aggregate("4h")
        >>> [s.symbol for s in result.above80]
        ['XYZUSDT']
    """

    def __init__(
        self,
        directory: SymbolDirectory,
        client: BinanceAPIClient,
        kline_limit: int = 50,
        rsi_period: int = 14,
        min_closing_prices: int = 14,
        max_concurrency: int = 20,
        symbol_timeout: float = 15.0
    ) -> None:
        if max_concurrency <= 0:
            raise ValueError(f"max_concurrency must be positive, got {max_concurrency}")
        self._directory = directory
        self._client = client
        self._kline_limit = kline_limit
        self._rsi_period = rsi_period
        self._min_closing_prices = min_closing_prices
        self._max_concurrency = max_concurrency
        self._symbol_timeout = symbol_timeout
        self._logger = get_logger(__name__)

    async def aggregate(self, interval: str) -> CategorizedRSI:
        """
        Bucket every eligible trading pair by its latest RSI on interval.

        Returns:
            CategorizedRSI with all eight categories present

        Raises:
            UpstreamError: If the trading pair list cannot be fetched
            InternalError: On any unexpected failure while aggregating
        """
        symbols = await self._directory.list_eligible_symbols()
        result = CategorizedRSI()
        if not symbols:
            self._logger.warning(f"No trading pairs to scan for {interval}")
            return result

        self._logger.info(f"Computing {interval} RSI for {len(symbols)} symbols")
        loop = asyncio.get_running_loop()
        started = loop.time()

        semaphore = asyncio.Semaphore(self._max_concurrency)
        tasks = [
            asyncio.create_task(self._bounded(semaphore, symbol, interval))
            for symbol in symbols
        ]
        try:
            outcomes: List[Optional[Classified]] = await asyncio.gather(*tasks)
        except InternalError:
            raise
        except Exception as e:
            raise InternalError(f"RSI aggregation failed: {e}") from e
        finally:
            # Stop the rest after a failure and collect every task's outcome
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        for outcome in outcomes:
            if outcome is None:
                continue
            category, entry = outcome
            result.add(category, entry)

        kept = result.total()
        self._logger.info(
            f"RSI {interval}: {kept}/{len(symbols)} symbols classified, "
            f"{len(symbols) - kept} skipped in {loop.time() - started:.1f}s"
        )
        return result

    async def _bounded(
        self, semaphore: asyncio.Semaphore, symbol: str, interval: str
    ) -> Optional[Classified]:
        async with semaphore:
            try:
                return await asyncio.wait_for(
                    self.classify_symbol(symbol, interval), timeout=self._symbol_timeout
                )
            except asyncio.TimeoutError:
                self._logger.warning(f"Timed out fetching data for {symbol} after {self._symbol_timeout}s")
                return None
            except (UpstreamError, InsufficientDataError) as e:
                self._logger.warning(f"Skipping {symbol}: {e}")
                return None
            except InternalError:
                raise
            except Exception as e:
                raise InternalError(f"Unexpected error processing {symbol}: {e}") from e

    async def classify_symbol(self, symbol: str, interval: str) -> Optional[Classified]:
        """
        Fetch, compute and classify one symbol.

        Returns:
            (category, entry), or None when the series is too short

        Raises:
            UpstreamError: If the closes cannot be fetched
            InsufficientDataError: If the series is too short for the RSI period
        """
        closes = await self._client.get_closing_prices(symbol, interval, limit=self._kline_limit)
        if len(closes) < self._min_closing_prices:
            self._logger.warning(f"Insufficient data for {symbol}: {len(closes)} closes")
            return None

        value = round(latest_rsi(closes, self._rsi_period), RSI_DECIMALS)
        if not 0.0 <= value <= 100.0:
            raise InternalError(f"RSI out of range for {symbol}: {value}")

        return classify(value), SymbolRSI(symbol=symbol, rsi=value)
