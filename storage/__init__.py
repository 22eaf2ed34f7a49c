"""
Storage Package

In-memory caching used by the service. Nothing here survives a restart.
"""

from storage.memory_cache import TTLCache

__all__ = ["TTLCache"]
