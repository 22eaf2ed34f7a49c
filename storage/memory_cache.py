"""
In-Memory TTL Cache

A single-slot cache that remembers one value together with the time it was
stored. Readers get the value only while its age is below the TTL. Writers
replace value and timestamp together, so a reader never sees a new value
paired with an old timestamp.

No locking: two coroutines that find the entry stale at the same moment will
both refresh it, and the last writer wins.
"""

import time
from typing import Callable, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class TTLCache(Generic[T]):
    """
    Cache one value for ttl seconds.

    Args:
        ttl: Time-to-live in seconds
        clock: Monotonic time source, injectable for tests

    Example:
        >>> cache = TTLCache(ttl=86400)
        >>> cache.get() is None
        True
        >>> cache.set(["BTCUSDT"])
        >>> cache.get()
        ['BTCUSDT']
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._entry: Optional[Tuple[T, float]] = None

    def get(self) -> Optional[T]:
        """Return the cached value, or None if empty or expired."""
        entry = self._entry
        if entry is None:
            return None
        value, stored_at = entry
        if self._clock() - stored_at >= self.ttl:
            return None
        return value

    def set(self, value: T) -> None:
        self._entry = (value, self._clock())

    def clear(self) -> None:
        self._entry = None

    def age(self) -> Optional[float]:
        """Seconds since the value was stored, None if empty."""
        if self._entry is None:
            return None
        return self._clock() - self._entry[1]
