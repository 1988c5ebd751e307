"""
Prediction Router
Marshals JSON requests to the forecasting engine and back.
"""
import logging
import random
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.core.config import settings
from app.core.exceptions import InvalidArgumentError
from app.models.expense import CategoryRequest, CategorySuggestionPublic, SpendingInsightRequest
from app.models.revenue import (
    DashboardRequest,
    ForecastRequest,
    PredictionPublic,
    RevenueAnalyticsRequest,
    RevenueForecastPublic,
)
from app.utils.analyzer import FinanceAnalyzer
from app.utils.categorizer import suggest_category
from app.utils.forecasting import ensemble_forecast, simple_projection
from app.utils.model_status import ModelStatusRegistry
from app.utils.scenarios import generate_scenarios, identify_key_drivers
from app.utils.series import TimePoint, to_series

router = APIRouter()
logger = logging.getLogger(__name__)
finance_analyzer = FinanceAnalyzer(settings.DEFAULT_MONTHLY_LIMIT)


def get_rng() -> random.Random:
    return random.Random(settings.RANDOM_SEED)


def get_model_status(request: Request) -> ModelStatusRegistry:
    return request.app.state.model_status


def _clamp_horizon(horizon) -> int:
    if horizon is None:
        horizon = settings.DEFAULT_HORIZON
    return min(settings.MAX_HORIZON, max(1, horizon))


def _series(points) -> List[TimePoint]:
    try:
        return to_series([point.model_dump() for point in points])
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.detail)


@router.post("/revenue", response_model=RevenueForecastPublic)
def predict_revenue(
    body: ForecastRequest,
    rng: random.Random = Depends(get_rng),
    registry: ModelStatusRegistry = Depends(get_model_status),
):
    """
    Ensemble forecast for the supplied revenue history, plus scenarios and key drivers.
    """
    series = _series(body.series)
    horizon = _clamp_horizon(body.horizon)

    try:
        predictions = ensemble_forecast(series, horizon, rng)
        scenarios = generate_scenarios(series, rng)
        drivers = identify_key_drivers(series, body.retention_rate)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.detail)
    except Exception as e:
        logger.error(f"Prediction failed: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to generate predictions: {str(e)}")

    logger.info(f"Generated {len(predictions)} predictions from {len(series)} data points")

    return RevenueForecastPublic(
        predictions=[
            PredictionPublic(
                period=f"Period {idx + 1}",
                amount=pred.amount,
                confidence=pred.confidence,
                change=pred.change,
                trend=pred.trend,
                is_highlighted=idx == 0,
            )
            for idx, pred in enumerate(predictions)
        ],
        scenarios=[scenario.to_dict() for scenario in scenarios],
        key_drivers=[driver.to_dict() for driver in drivers],
        model_status=registry.current().to_dict(),
        data_points=len(series),
    )


@router.post("/revenue/analytics")
def revenue_analytics(body: RevenueAnalyticsRequest, rng: random.Random = Depends(get_rng)) -> Dict:
    series = _series(body.series)
    monthly = finance_analyzer.monthly_totals(series)
    projection = simple_projection(list(monthly.values()), body.periods, rng)

    return {
        **finance_analyzer.revenue_analytics(series),
        "monthly": monthly,
        "projection": projection,
    }


@router.post("/expenses/insight")
def spending_insight(body: SpendingInsightRequest) -> Dict:
    expenses = [expense.model_dump() for expense in body.expenses]
    try:
        insights = finance_analyzer.budget_insights(expenses, body.monthly_limit)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.detail)

    return {
        **insights.to_dict(),
        "insight": " ".join(insights.insight_sentences),
    }


@router.post("/expenses/summary")
def expense_summary(body: SpendingInsightRequest) -> Dict:
    expenses = [expense.model_dump() for expense in body.expenses]
    if not expenses:
        raise HTTPException(status_code=404, detail="No expense data available")

    try:
        return finance_analyzer.expense_summary(expenses, body.monthly_limit)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.detail)


@router.post("/dashboard")
def dashboard(
    body: DashboardRequest,
    rng: random.Random = Depends(get_rng),
    registry: ModelStatusRegistry = Depends(get_model_status),
) -> Dict:
    revenue = _series(body.revenue)
    expenses = [expense.model_dump() for expense in body.expenses]

    kpis = finance_analyzer.dashboard_kpis(revenue, expenses, horizon=3, rng=rng)
    predictions = kpis.pop("predictions")

    return {
        "kpis": kpis,
        "predictions": [
            {
                "period": f"Month {idx + 1}",
                "amount": pred["amount"],
                "confidence": pred["confidence"],
                "trend": pred["trend"],
            }
            for idx, pred in enumerate(predictions)
        ],
        "model_status": registry.current().to_dict(),
        "data_points": len(revenue),
    }


@router.post("/category", response_model=CategorySuggestionPublic)
def category_suggestion(body: CategoryRequest):
    if not body.description.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Description is required")

    suggestion = suggest_category(body.description)
    return CategorySuggestionPublic(description=body.description, **suggestion.to_dict())


@router.get("/model/metrics")
def model_metrics(registry: ModelStatusRegistry = Depends(get_model_status)) -> Dict:
    return registry.metrics()


@router.post("/model/refresh")
def refresh_model(registry: ModelStatusRegistry = Depends(get_model_status)) -> Dict:
    return registry.refresh().to_dict()
