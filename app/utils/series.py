from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from app.core.exceptions import InvalidArgumentError
from app.utils import stats

logger = logging.getLogger(__name__)

MIN_ANALYSIS_POINTS = 4


@dataclass(frozen=True)
class TimePoint:
    """One revenue or expense record reduced to its amount and date."""

    amount: float
    date: date
    category: Optional[str] = None
    source: Optional[str] = None
    status: Optional[str] = None
    client_id: Optional[str] = None


@dataclass
class SeriesAnalysis:
    """Statistics derived from a chronologically ordered series."""

    trend: Dict[str, float]
    seasonality: Optional[List[float]]
    volatility: float
    last_value: float
    growth_rate: float
    moving_averages: Dict[str, List[float]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parse_date(value: Union[str, date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
    raise InvalidArgumentError(f"Invalid date: {value!r}")


def validate_amount(value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid amount: {value!r}")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Invalid amount: {value!r}")
    if not math.isfinite(amount) or amount < 0:
        raise InvalidArgumentError(f"Amount must be a non-negative number, got {value!r}")
    return amount


def to_time_point(record: Union[TimePoint, Mapping[str, Any]]) -> TimePoint:
    if isinstance(record, TimePoint):
        validate_amount(record.amount)
        return record
    if "date" not in record:
        raise InvalidArgumentError("Each series entry needs a date")
    return TimePoint(
        amount=validate_amount(record.get("amount", 0)),
        date=parse_date(record["date"]),
        category=record.get("category"),
        source=record.get("source"),
        status=record.get("status"),
        client_id=record.get("client_id") or record.get("clientId"),
    )


def to_series(records: Optional[Iterable[Union[TimePoint, Mapping[str, Any]]]]) -> List[TimePoint]:
    """
    Validate raw records into TimePoints, keeping the caller's order.

    Raises InvalidArgumentError on negative amounts or unparseable dates.
    """
    if not records:
        return []
    return [to_time_point(record) for record in records]


def amounts(series: Sequence[TimePoint]) -> List[float]:
    return [float(point.amount) for point in series]


def analyze_series(series: Optional[Sequence[TimePoint]]) -> Optional[SeriesAnalysis]:
    """
    Build a SeriesAnalysis from a pre-sorted series.

    The series is not re-sorted. Returns None below four points; seasonality
    is only present from twelve points on.
    """
    if not series or len(series) < MIN_ANALYSIS_POINTS:
        logger.debug(f"Series too short for analysis ({len(series or [])} points)")
        return None

    values = amounts(series)
    return SeriesAnalysis(
        trend=stats.linear_trend(values),
        seasonality=stats.seasonality(values),
        volatility=stats.volatility(values),
        last_value=values[-1],
        growth_rate=stats.growth_rate(values),
        moving_averages={
            "ma3": stats.moving_average(values, 3),
            "ma7": stats.moving_average(values, 7),
        },
    )
