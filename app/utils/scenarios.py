"""
Best/likely/worst case projections and "key driver" explanations for the
revenue dashboard.
"""
from __future__ import annotations

import logging
import random
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from app.core.exceptions import InvalidArgumentError
from app.utils.series import SeriesAnalysis, TimePoint, analyze_series

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_RATE = 0.8
SINGLE_CLIENT_RETENTION_RATE = 0.85


@dataclass(frozen=True)
class Scenario:
    title: str
    amount: float
    description: str
    probability: int
    factors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Driver:
    factor: str
    impact: str
    description: str
    confidence: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


BEST_CASE = {
    "title": "Best Case",
    "description": "Strong market conditions and client retention",
    "probability": 25,
    "factors": ["High client retention", "Market expansion", "Low competition"],
}
MOST_LIKELY = {
    "title": "Most Likely",
    "description": "Continuation of current trends",
    "probability": 60,
    "factors": ["Stable client base", "Normal seasonality", "Market stability"],
}
WORST_CASE = {
    "title": "Worst Case",
    "description": "Economic headwinds and client churn",
    "probability": 15,
    "factors": ["Client churn", "Market contraction", "High competition"],
}


def _scenario(template: Dict[str, Any], amount: float) -> Scenario:
    return Scenario(
        title=template["title"],
        amount=max(0.0, amount),
        description=template["description"],
        probability=template["probability"],
        factors=list(template["factors"]),
    )


def default_scenarios() -> List[Scenario]:
    return [
        _scenario(BEST_CASE, 420000),
        _scenario(MOST_LIKELY, 380000),
        _scenario(WORST_CASE, 320000),
    ]


def scenarios_from_analysis(
    analysis: Optional[SeriesAnalysis],
    rng: Optional[random.Random] = None,
) -> List[Scenario]:
    if analysis is None:
        return default_scenarios()

    rng = rng or random.Random()
    base = analysis.last_value
    growth = analysis.growth_rate

    best = base * (1 + growth * 1.5) * (1 + rng.uniform(0, 0.2))
    likely = base * (1 + growth) * (1 + rng.uniform(-0.05, 0.05))
    worst = base * (1 + growth * 0.5) * (1 - rng.uniform(0, 0.3))

    return [
        _scenario(BEST_CASE, best),
        _scenario(MOST_LIKELY, likely),
        _scenario(WORST_CASE, worst),
    ]


def generate_scenarios(
    series: Optional[Sequence[TimePoint]],
    rng: Optional[random.Random] = None,
) -> List[Scenario]:
    """Always three scenarios; short or empty series get the fixed defaults."""
    return scenarios_from_analysis(analyze_series(series), rng)


def default_drivers() -> List[Driver]:
    return [
        Driver(
            factor="Growth Momentum",
            impact="High",
            description="Revenue growing at 4.3% monthly rate",
            confidence="High",
        ),
        Driver(
            factor="Seasonal Patterns",
            impact="Medium",
            description="Q4 typically shows 15% uplift",
            confidence="Medium",
        ),
        Driver(
            factor="Client Retention",
            impact="High",
            description="Strong client retention rate of 85%",
            confidence="High",
        ),
    ]


def drivers_from_analysis(analysis: Optional[SeriesAnalysis], retention_rate: float) -> List[Driver]:
    if analysis is None:
        return default_drivers()

    drivers = []
    if analysis.trend["slope"] > 0:
        drivers.append(
            Driver(
                factor="Growth Momentum",
                impact="High",
                description=f"Revenue growing at {analysis.growth_rate * 100:.1f}% monthly rate",
                confidence="High" if analysis.trend["r_squared"] > 0.7 else "Medium",
            )
        )

    if analysis.seasonality is not None:
        drivers.append(
            Driver(
                factor="Seasonal Patterns",
                impact="Medium",
                description="Clear seasonal trends detected in revenue data",
                confidence="High",
            )
        )

    if analysis.volatility > analysis.last_value * 0.2:
        drivers.append(
            Driver(
                factor="Revenue Volatility",
                impact="High",
                description="High revenue volatility suggests need for stabilization",
                confidence="High",
            )
        )

    if retention_rate > 0.8:
        drivers.append(
            Driver(
                factor="Client Retention",
                impact="High",
                description=f"Strong client retention rate of {retention_rate * 100:.1f}%",
                confidence="High",
            )
        )

    return drivers or default_drivers()


def identify_key_drivers(
    series: Optional[Sequence[TimePoint]],
    retention_rate: Optional[float] = None,
) -> List[Driver]:
    """
    Ranked explanations for the observed revenue behaviour.

    When ``retention_rate`` is omitted it is estimated from the client ids
    in the series.
    """
    if retention_rate is None:
        retention_rate = estimate_retention(series or [])
    elif not 0 <= retention_rate <= 1:
        raise InvalidArgumentError(f"Retention rate must be within [0, 1], got {retention_rate!r}")
    return drivers_from_analysis(analyze_series(series), retention_rate)


def estimate_retention(series: Sequence[TimePoint]) -> float:
    """Share of clients from the first half of the series that come back in the second half."""
    client_ids = [point.client_id for point in series if point.client_id]
    if not client_ids:
        return DEFAULT_RETENTION_RATE
    if len(series) < 2:
        return SINGLE_CLIENT_RETENTION_RATE

    midpoint = len(series) // 2
    earlier = {point.client_id for point in series[:midpoint] if point.client_id}
    later = {point.client_id for point in series[midpoint:] if point.client_id}
    if not earlier:
        logger.debug("No client ids in the first half of the series, using default retention")
        return DEFAULT_RETENTION_RATE

    return round(len(earlier & later) / len(earlier), 4)
