"""
RSI Range Classifier

Maps an RSI value to one of eight ranges using a sorted boundary table:

    (-inf, 20) [20, 30) [30, 40) [40, 50) [50, 60) [60, 70) [70, 80) [80, +inf)

A boundary value belongs to the range it opens (30 -> between30and40).
"""

from bisect import bisect_right

from core.schemas import RSICategory

BOUNDARIES = (20.0, 30.0, 40.0, 50.0, 60.0, 70.0, 80.0)

# CATEGORIES[i] covers [BOUNDARIES[i - 1], BOUNDARIES[i])
CATEGORIES = (
    RSICategory.BELOW_20,
    RSICategory.BETWEEN_20_30,
    RSICategory.BETWEEN_30_40,
    RSICategory.BETWEEN_40_50,
    RSICategory.BETWEEN_50_60,
    RSICategory.BETWEEN_60_70,
    RSICategory.BETWEEN_70_80,
    RSICategory.ABOVE_80,
)


def classify(value: float) -> RSICategory:
    """Return the RSI range that contains value."""
    return CATEGORIES[bisect_right(BOUNDARIES, value)]
