"""
Forecasting strategies and the ensemble that averages them.

Three strategies share one signature, ``forecast(series, horizon, rng) ->
List[PeriodPrediction]``:

* trend + seasonal projection from the series analysis (with a small random walk)
* exponential smoothing
* least squares extrapolation

``ensemble_forecast`` runs all three and averages them period by period.
"""
from __future__ import annotations

import logging
import math
import random
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from app.core.exceptions import InvalidArgumentError
from app.utils import stats
from app.utils.series import SeriesAnalysis, TimePoint, amounts, analyze_series

logger = logging.getLogger(__name__)

SMOOTHING_ALPHA = 0.3
SEASONAL_WEIGHT = 0.3
RANDOM_WALK_SCALE = 0.1

BASE_CONFIDENCE = 85
MIN_CONFIDENCE = 50
MAX_CONFIDENCE = 95
SMOOTHING_CONFIDENCE = 75
REGRESSION_CONFIDENCE = 80
DEFAULT_CONFIDENCE = 70

DEFAULT_BASE_AMOUNT = 350000
DEFAULT_STEP_AMOUNT = 15000


@dataclass(frozen=True)
class PeriodPrediction:
    period: int
    amount: float
    confidence: int
    trend: str
    change: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ForecastMethod(str, Enum):
    TREND_SEASONAL = "trend_seasonal"
    EXPONENTIAL_SMOOTHING = "exponential_smoothing"
    LINEAR_REGRESSION = "linear_regression"


def validate_horizon(horizon: Any) -> int:
    """Integers only; anything below 1 means no periods are requested."""
    if isinstance(horizon, bool) or not isinstance(horizon, int):
        raise InvalidArgumentError(f"Horizon must be an integer, got {horizon!r}")
    return max(0, horizon)


def forecast_confidence(analysis: SeriesAnalysis, period: int, data_length: int) -> int:
    confidence = BASE_CONFIDENCE - (period - 1) * 2

    if data_length < 12:
        confidence -= 10
    if data_length < 6:
        confidence -= 15

    if analysis.volatility > analysis.last_value * 0.3:
        confidence -= 10

    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence))


def default_forecast(horizon: int) -> List[PeriodPrediction]:
    return [
        PeriodPrediction(
            period=i + 1,
            amount=float(DEFAULT_BASE_AMOUNT + i * DEFAULT_STEP_AMOUNT),
            confidence=DEFAULT_CONFIDENCE,
            trend="up",
            change="+4.3%",
        )
        for i in range(horizon)
    ]


def trend_seasonal_forecast(
    series: Sequence[TimePoint],
    horizon: int,
    rng: Optional[random.Random] = None,
) -> List[PeriodPrediction]:
    horizon = validate_horizon(horizon)
    analysis = analyze_series(series)
    if analysis is None:
        logger.debug("Not enough history for a trend projection, using default forecast")
        return default_forecast(horizon)

    rng = rng or random.Random()
    base_value = analysis.last_value
    slope = analysis.trend["slope"]

    predictions = []
    for i in range(1, horizon + 1):
        prediction = base_value + slope * i

        if analysis.seasonality:
            prediction += analysis.seasonality[i % len(analysis.seasonality)] * SEASONAL_WEIGHT

        prediction += (rng.random() - 0.5) * analysis.volatility * RANDOM_WALK_SCALE
        prediction = max(0.0, prediction)

        predictions.append(
            PeriodPrediction(
                period=i,
                amount=prediction,
                confidence=forecast_confidence(analysis, i, len(series)),
                trend="up" if prediction > base_value else "down",
                change=stats.percentage_change(base_value, prediction),
            )
        )
    return predictions


def exponential_smoothing_forecast(
    series: Sequence[TimePoint],
    horizon: int,
    rng: Optional[random.Random] = None,
) -> List[PeriodPrediction]:
    # Every step blends in the last observed value, not a rolling input.
    horizon = validate_horizon(horizon)
    values = amounts(series)
    if not values:
        return []

    smoothed = values[0]
    predictions = []
    for i in range(1, horizon + 1):
        smoothed = SMOOTHING_ALPHA * values[-1] + (1 - SMOOTHING_ALPHA) * smoothed
        predictions.append(
            PeriodPrediction(
                period=i,
                amount=smoothed,
                confidence=SMOOTHING_CONFIDENCE,
                trend="stable",
                change="0%",
            )
        )
    return predictions


def linear_regression_forecast(
    series: Sequence[TimePoint],
    horizon: int,
    rng: Optional[random.Random] = None,
) -> List[PeriodPrediction]:
    horizon = validate_horizon(horizon)
    values = amounts(series)
    if len(values) < 2:
        return []

    trend = stats.linear_trend(values)
    slope, intercept = trend["slope"], trend["intercept"]
    last_x = len(values)

    predictions = []
    for i in range(1, horizon + 1):
        prediction = slope * (last_x + i) + intercept
        predictions.append(
            PeriodPrediction(
                period=i,
                amount=max(0.0, prediction),
                confidence=REGRESSION_CONFIDENCE,
                trend="up" if slope > 0 else "down",
                change=stats.percentage_change(values[-1], prediction),
            )
        )
    return predictions


Forecaster = Callable[..., List[PeriodPrediction]]

FORECASTERS: Dict[ForecastMethod, Forecaster] = {
    ForecastMethod.TREND_SEASONAL: trend_seasonal_forecast,
    ForecastMethod.EXPONENTIAL_SMOOTHING: exponential_smoothing_forecast,
    ForecastMethod.LINEAR_REGRESSION: linear_regression_forecast,
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def combine_forecasts(forecasts: Sequence[Sequence[PeriodPrediction]], horizon: int) -> List[PeriodPrediction]:
    """
    Average amount and confidence per period across the forecasts that have it.

    Periods no forecast covers are dropped, so the result can be shorter than
    ``horizon``.
    """
    combined = []
    for index in range(validate_horizon(horizon)):
        entries = [forecast[index] for forecast in forecasts if len(forecast) > index]
        if not entries:
            continue

        combined.append(
            PeriodPrediction(
                period=index + 1,
                amount=sum(entry.amount for entry in entries) / len(entries),
                confidence=_round_half_up(sum(entry.confidence for entry in entries) / len(entries)),
                trend="ensemble",
                change="0%",
            )
        )
    return combined


def ensemble_forecast(
    series: Sequence[TimePoint],
    horizon: int,
    rng: Optional[random.Random] = None,
) -> List[PeriodPrediction]:
    horizon = validate_horizon(horizon)
    rng = rng or random.Random()
    forecasts = [forecaster(series, horizon, rng) for forecaster in FORECASTERS.values()]
    return combine_forecasts(forecasts, horizon)


def simple_projection(
    values: Sequence[float],
    periods: int = 6,
    rng: Optional[random.Random] = None,
) -> List[float]:
    """
    Month-level projection used by the revenue analytics chart.

    Short histories repeat their mean. Otherwise the last value is pushed along
    the zero-based slope, scaled by the 3-month average ratio and jittered by
    up to 5% either way.
    """
    periods = validate_horizon(periods)
    values = list(values)
    if len(values) < 3:
        average = sum(values) / len(values) if values else 0.0
        return [average] * periods

    rng = rng or random.Random()
    # The zero-based slope equals the one-based slope; only the intercept differs.
    slope = stats.linear_trend(values)["slope"]
    last_value = values[-1]
    smoothed = stats.moving_average(values, 3, keep_head=True)
    seasonal_factor = smoothed[-1] / last_value if last_value else 1.0

    projection = []
    for i in range(1, periods + 1):
        prediction = (last_value + slope * i) * seasonal_factor
        prediction *= 0.95 + rng.random() * 0.1
        projection.append(float(max(0, round(prediction))))
    return projection
