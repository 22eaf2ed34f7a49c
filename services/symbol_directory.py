"""
Trading Pair Directory

Looks up the Binance spot pairs that are currently trading and quoted in the
configured reference currency, and keeps the list in a TTLCache so the
exchangeInfo endpoint is hit at most once per TTL window.
"""

from typing import List, Optional

from core.errors import UpstreamError
from core.logging import get_logger
from exchanges.binance import BinanceAPIClient
from storage import TTLCache


class SymbolDirectory:
    """
    Cached list of eligible trading pairs.

    Args:
        client: Open BinanceAPIClient
        cache: Cache owned by this directory
        quote_asset: Reference currency (e.g., "USDT")
        strict: If True, lookup failures raise UpstreamError; if False they
            are logged and an empty list is returned

    Example:
        >>> directory = SymbolDirectory(client, TTLCache(ttl=86400), "USDT")
        >>> symbols = await directory.list_eligible_symbols()
    """

    def __init__(
        self,
        client: BinanceAPIClient,
        cache: TTLCache,
        quote_asset: str = "USDT",
        strict: bool = True
    ) -> None:
        self._client = client
        self._cache = cache
        self._quote_asset = quote_asset.upper()
        self._strict = strict
        self._logger = get_logger(__name__)

    async def list_eligible_symbols(self) -> List[str]:
        """
        Return the eligible trading pairs, from cache while it is fresh.

        Raises:
            UpstreamError: If the lookup fails and the directory is strict
        """
        cached = self._cache.get()
        if cached is not None:
            self._logger.debug(f"Returning {len(cached)} cached trading pairs")
            return list(cached)

        self._logger.info(f"Fetching {self._quote_asset} trading pairs from Binance")
        try:
            symbols = await self._client.get_trading_symbols(self._quote_asset)
        except UpstreamError as e:
            self._logger.error(f"Error fetching trading pairs: {e}")
            if self._strict:
                raise
            return []

        # Store a tuple so callers can't mutate the cached list
        self._cache.set(tuple(symbols))
        return list(symbols)

    def cached_count(self) -> Optional[int]:
        """Number of cached pairs, None when nothing fresh is cached."""
        cached = self._cache.get()
        return None if cached is None else len(cached)

    def cache_age(self) -> Optional[float]:
        """Seconds since the cached list was fetched, None when nothing fresh is cached."""
        if self._cache.get() is None:
            return None
        return self._cache.age()

    def invalidate(self) -> None:
        """Drop the cached list; the next lookup refetches it."""
        self._cache.clear()
        self._logger.info("Trading pair cache invalidated")
