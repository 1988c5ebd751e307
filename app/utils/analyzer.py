from __future__ import annotations

import logging
import random
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.core.exceptions import InvalidArgumentError
from app.utils.forecasting import ensemble_forecast
from app.utils.series import TimePoint, validate_amount

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


@dataclass
class BudgetInsights:
    """Spending against a monthly limit, with the sentences shown on the dashboard."""

    total: float
    over_limit: bool
    by_category: Dict[str, float] = field(default_factory=dict)
    top_category: Optional[Dict[str, Any]] = None
    insight_sentences: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def validate_limit(monthly_limit: Any) -> float:
    try:
        return validate_amount(monthly_limit)
    except InvalidArgumentError:
        raise InvalidArgumentError(f"Monthly limit must be a non-negative number, got {monthly_limit!r}")


class FinanceAnalyzer:
    """
    Aggregations behind the expense and revenue widgets of the dashboard.

    Works on plain expense mappings (``{"amount": ..., "category": ...}``) and
    on TimePoint revenue series; nothing is persisted between calls.
    """

    def __init__(self, monthly_limit: float = 50000.0, concentration_share: float = 0.3) -> None:
        self._monthly_limit = validate_limit(monthly_limit)
        self._concentration_share = concentration_share

    def total(self, expenses: Sequence[Mapping[str, Any]]) -> float:
        return sum(validate_amount(exp.get("amount", 0)) for exp in expenses)

    def category_totals(self, expenses: Sequence[Mapping[str, Any]]) -> Dict[str, float]:
        totals: Dict[str, float] = defaultdict(float)
        for exp in expenses:
            totals[exp.get("category") or UNCATEGORIZED] += validate_amount(exp.get("amount", 0))
        return dict(totals)

    @staticmethod
    def ranked_categories(totals: Mapping[str, float]) -> List[tuple]:
        # sorted() is stable, so ties keep first-seen order.
        return sorted(totals.items(), key=lambda item: item[1], reverse=True)

    def budget_insights(
        self,
        expenses: Sequence[Mapping[str, Any]],
        monthly_limit: Optional[float] = None,
    ) -> BudgetInsights:
        limit = self._monthly_limit if monthly_limit is None else validate_limit(monthly_limit)
        expenses = expenses or []

        by_category = self.category_totals(expenses)
        total = sum(by_category.values())
        ranked = self.ranked_categories(by_category)
        top = ranked[0] if ranked else None
        over_limit = total > limit

        sentences = [f"Total spent: {total:,.0f}."]
        if top:
            sentences.append(f"Highest spending in {top[0]} ({top[1]:,.0f}).")

        if over_limit:
            sentences.append("Budget exceeded; consider reducing discretionary spending.")
        elif total > limit * 0.8:
            sentences.append("Approaching budget limit; monitor spending closely.")
        elif total < limit * 0.5:
            sentences.append("Well below budget; consider strategic investments.")
        else:
            sentences.append("Spending within healthy range; keep tracking.")

        concentrated = [
            category
            for category, amount in by_category.items()
            if amount > total * self._concentration_share
        ]
        if concentrated:
            sentences.append(f"High concentration in {', '.join(concentrated)} - consider diversification.")

        return BudgetInsights(
            total=total,
            over_limit=over_limit,
            by_category=by_category,
            top_category={"name": top[0], "amount": top[1]} if top else None,
            insight_sentences=sentences,
        )

    def expense_summary(
        self,
        expenses: Sequence[Mapping[str, Any]],
        monthly_limit: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Budget insights plus the top three categories and the remaining budget."""
        limit = self._monthly_limit if monthly_limit is None else validate_limit(monthly_limit)
        insights = self.budget_insights(expenses, limit)

        top_categories = [
            {
                "category": category,
                "amount": amount,
                "percentage": round(amount / insights.total * 100, 1) if insights.total else 0.0,
            }
            for category, amount in self.ranked_categories(insights.by_category)[:3]
        ]

        return {
            "total": insights.total,
            "by_category": insights.by_category,
            "top_categories": top_categories,
            "over_limit": insights.over_limit,
            "remaining_budget": max(0.0, limit - insights.total),
            "insights": insights.insight_sentences,
        }

    def revenue_analytics(self, series: Sequence[TimePoint]) -> Dict[str, Any]:
        values = [point.amount for point in series]
        total = sum(values)

        growth = 0.0
        if len(values) > 1 and values[0]:
            growth = (values[-1] - values[0]) / values[0] * 100

        category_breakdown: Dict[str, float] = defaultdict(float)
        source_breakdown: Dict[str, float] = defaultdict(float)
        for point in series:
            category_breakdown[point.category or "General"] += point.amount
            source_breakdown[point.source or "Unknown"] += point.amount

        return {
            "total_revenue": total,
            "average_revenue": total / len(values) if values else 0.0,
            "growth_rate": round(growth, 1),
            "category_breakdown": dict(category_breakdown),
            "source_breakdown": dict(source_breakdown),
            "data_points": len(values),
        }

    @staticmethod
    def monthly_totals(series: Sequence[TimePoint]) -> Dict[str, float]:
        """Sum amounts per ``YYYY-MM`` of each point's date, ordered by month."""
        totals: Dict[str, float] = defaultdict(float)
        for point in series:
            totals[point.date.strftime("%Y-%m")] += point.amount
        return dict(sorted(totals.items()))

    def dashboard_kpis(
        self,
        revenue: Sequence[TimePoint],
        expenses: Sequence[Mapping[str, Any]],
        horizon: int = 3,
        rng: Optional[random.Random] = None,
    ) -> Dict[str, Any]:
        total_revenue = sum(point.amount for point in revenue)
        total_expenses = self.total(expenses or [])

        last = revenue[-1].amount if len(revenue) >= 1 else 0.0
        previous = revenue[-2].amount if len(revenue) >= 2 else 0.0
        month_over_month = (last - previous) / previous * 100 if previous > 0 else 0.0

        predictions = ensemble_forecast(revenue, horizon, rng)[:3]
        logger.debug(f"Dashboard KPIs computed from {len(revenue)} revenue points")

        return {
            "total_revenue": total_revenue,
            # Twelve-month window, regardless of how many points were supplied.
            "avg_monthly_revenue": total_revenue / 12,
            "month_over_month_growth": round(month_over_month, 1),
            "total_expenses": total_expenses,
            "net_profit": total_revenue - total_expenses,
            "predictions": [prediction.to_dict() for prediction in predictions],
        }
