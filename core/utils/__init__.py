"""
Core Utilities Package

Modules:
    - time: Timestamp conversion and normalization utilities
"""

from core.utils.time import ms_to_utc_datetime

__all__ = ["ms_to_utc_datetime"]
