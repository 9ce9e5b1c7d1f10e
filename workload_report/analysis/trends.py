"""Trend computation.

Directional trend labels for any ordered numeric series.
"""

from collections.abc import Sequence
from typing import Literal

TrendLabel = Literal["improving", "stable", "declining", "no_data"]

MIN_TREND_POINTS = 3


def classify_trend(values: Sequence[float], min_points: int = MIN_TREND_POINTS) -> TrendLabel:
    """Classify the direction of a series by comparing its last value to its midpoint.

    This is not a regression slope. The same rule applies to every domain;
    callers decide whether "improving" is good for their metric.

    Args:
        values: Numeric values in chronological order
        min_points: Minimum number of values required (default 3)

    Returns:
        "no_data" below min_points, otherwise "improving", "declining" or "stable"

    Example:
        >>> classify_trend([10, 20, 5])
        'declining'
    """
    if len(values) < min_points:
        return "no_data"

    last = values[-1]
    mid = values[len(values) // 2]

    if last > mid:
        return "improving"
    if last < mid:
        return "declining"
    return "stable"
