"""
Numeric building blocks shared by the series analyzer and the forecasters.

All helpers are pure functions over plain lists of floats.
"""
from __future__ import annotations

import math
import statistics
from typing import Dict, List, Optional, Sequence


def moving_average(values: Sequence[float], window: int, keep_head: bool = False) -> List[float]:
    """
    Trailing moving average.

    Returns one mean per full window, so ``[1, 2, 3, 4, 5]`` with a window of 3
    gives ``[2, 3, 4]``. With ``keep_head`` the first ``window - 1`` values are
    passed through and the result keeps the input length.
    """
    values = list(values)
    if window <= 0 or len(values) < window:
        return values

    averages = [
        statistics.fmean(values[i - window + 1 : i + 1])
        for i in range(window - 1, len(values))
    ]
    if keep_head:
        return values[: window - 1] + averages
    return averages


def linear_trend(values: Sequence[float]) -> Dict[str, float]:
    """Least squares fit against 1-based position; returns slope, intercept and r_squared."""
    n = len(values)
    if n == 0:
        return {"slope": 0.0, "intercept": 0.0, "r_squared": 0.0}
    if n == 1 or min(values) == max(values):
        # No variance: flat line through the value, r_squared pinned to 0.
        return {"slope": 0.0, "intercept": float(values[0]), "r_squared": 0.0}

    xs = range(1, n + 1)
    mean_x = statistics.fmean(xs)
    mean_y = statistics.fmean(values)

    sxy = sum((x - mean_x) * (y - mean_y) for x, y in zip(xs, values))
    sxx = sum((x - mean_x) ** 2 for x in xs)
    slope = sxy / sxx
    intercept = mean_y - slope * mean_x

    ss_res = sum((y - (slope * x + intercept)) ** 2 for x, y in zip(xs, values))
    ss_tot = sum((y - mean_y) ** 2 for y in values)
    r_squared = 0.0 if ss_tot == 0 else 1 - ss_res / ss_tot

    return {"slope": slope, "intercept": intercept, "r_squared": r_squared}


def seasonality(values: Sequence[float]) -> Optional[List[float]]:
    """
    Average deviation from the overall mean per position bucket (index % 12).

    Buckets are positional, not calendar months. ``None`` below 12 points.
    """
    if len(values) < 12:
        return None

    sums = [0.0] * 12
    counts = [0] * 12
    for index, value in enumerate(values):
        sums[index % 12] += value
        counts[index % 12] += 1

    overall = statistics.fmean(values)
    return [
        (sums[month] / counts[month]) - overall if counts[month] else 0.0
        for month in range(12)
    ]


def volatility(values: Sequence[float]) -> float:
    """Population stdev of period-over-period relative change, skipping zero bases."""
    if len(values) < 2:
        return 0.0

    returns = [
        (current - previous) / previous
        for previous, current in zip(values, values[1:])
        if previous != 0
    ]
    if not returns:
        return 0.0
    return statistics.pstdev(returns)


def growth_rate(values: Sequence[float]) -> float:
    """``(last - first) / first / len(values)``; not compounded."""
    if len(values) < 2:
        return 0.0
    first = values[0]
    if first == 0:
        return 0.0
    return (values[-1] - first) / first / len(values)


def percentage_change(old_value: float, new_value: float) -> str:
    if old_value == 0:
        return "+100%" if new_value > 0 else "0%"
    change = (new_value - old_value) / old_value * 100
    if not math.isfinite(change):
        return "0%"
    return f"{'+' if change >= 0 else ''}{change:.1f}%"
