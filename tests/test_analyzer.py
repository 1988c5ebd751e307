import random
from datetime import date

import pytest

from app.core.exceptions import InvalidArgumentError
from app.utils.analyzer import FinanceAnalyzer
from app.utils.series import TimePoint

sample_expenses = [
    {"category": "Cloud & Hosting", "amount": 15000.0},
    {"category": "Rent", "amount": 80000.0},
    {"category": "Dining", "amount": 2500.0},
    {"category": "Marketing", "amount": 12000.0},
    {"category": "Software", "amount": 8000.0},
]

sample_revenue = [
    TimePoint(amount=350000, date=date(2024, 1, 15), category="Recurring", source="Client A"),
    TimePoint(amount=420000, date=date(2024, 1, 20), category="One-time", source="Product Sales"),
    TimePoint(amount=380000, date=date(2024, 2, 10), category="Consulting", source="Client B"),
    TimePoint(amount=450000, date=date(2024, 2, 25), category="Recurring", source="Subscription"),
    TimePoint(amount=410000, date=date(2024, 3, 5), category="Service", source="Client A"),
]


def test_over_limit_warning():
    result = FinanceAnalyzer().budget_insights([{"amount": 60000, "category": "Rent"}], 50000)
    assert result.over_limit is True
    assert result.total == 60000
    assert result.insight_sentences == [
        "Total spent: 60,000.",
        "Highest spending in Rent (60,000).",
        "Budget exceeded; consider reducing discretionary spending.",
        "High concentration in Rent - consider diversification.",
    ]


@pytest.mark.parametrize(
    "amount, expected",
    [
        (45000, "Approaching budget limit; monitor spending closely."),
        (10000, "Well below budget; consider strategic investments."),
        (30000, "Spending within healthy range; keep tracking."),
    ],
)
def test_budget_status_sentence(amount, expected):
    result = FinanceAnalyzer().budget_insights([{"amount": amount, "category": "Rent"}], 50000)
    assert result.over_limit is False
    assert result.insight_sentences[2] == expected


def test_budget_insights_without_expenses():
    result = FinanceAnalyzer().budget_insights([], 50000)
    assert result.total == 0
    assert result.top_category is None
    assert result.insight_sentences == [
        "Total spent: 0.",
        "Well below budget; consider strategic investments.",
    ]


def test_concentration_lists_every_large_category():
    expenses = [
        {"category": "Rent", "amount": 40},
        {"category": "Travel", "amount": 35},
        {"category": "Food", "amount": 25},
    ]
    result = FinanceAnalyzer().budget_insights(expenses, 1000)
    assert result.insight_sentences[-1] == "High concentration in Rent, Travel - consider diversification."


def test_concentration_threshold_is_strict():
    expenses = [
        {"category": "Rent", "amount": 50},
        {"category": "Food", "amount": 30},
        {"category": "Misc", "amount": 20},
    ]
    result = FinanceAnalyzer().budget_insights(expenses, 1000)
    assert result.insight_sentences[-1] == "High concentration in Rent - consider diversification."


def test_category_totals_default_to_uncategorized():
    analyzer = FinanceAnalyzer()
    totals = analyzer.category_totals([{"amount": 10}, {"amount": 5, "category": "Rent"}, {"amount": 1, "category": ""}])
    assert totals == {"Uncategorized": 11, "Rent": 5}


def test_top_category_and_breakdown():
    result = FinanceAnalyzer().budget_insights(sample_expenses, 50000)
    assert result.top_category == {"name": "Rent", "amount": 80000}
    assert result.by_category["Dining"] == 2500


def test_negative_amounts_rejected():
    with pytest.raises(InvalidArgumentError):
        FinanceAnalyzer().budget_insights([{"amount": -5, "category": "Rent"}], 100)


def test_invalid_limit_rejected():
    with pytest.raises(InvalidArgumentError):
        FinanceAnalyzer().budget_insights(sample_expenses, "abc")
    with pytest.raises(InvalidArgumentError):
        FinanceAnalyzer(monthly_limit=-1)


def test_expense_summary():
    summary = FinanceAnalyzer().expense_summary(sample_expenses, 200000)
    assert summary["total"] == 117500
    assert [c["category"] for c in summary["top_categories"]] == ["Rent", "Cloud & Hosting", "Marketing"]
    assert summary["top_categories"][0]["percentage"] == 68.1
    assert summary["remaining_budget"] == 82500
    assert summary["over_limit"] is False


def test_expense_summary_remaining_budget_floor():
    summary = FinanceAnalyzer(monthly_limit=50000).expense_summary(sample_expenses)
    assert summary["over_limit"] is True
    assert summary["remaining_budget"] == 0


def test_revenue_analytics():
    analytics = FinanceAnalyzer().revenue_analytics(sample_revenue)
    assert analytics["total_revenue"] == 2010000
    assert analytics["average_revenue"] == 402000
    assert analytics["growth_rate"] == 17.1
    assert analytics["category_breakdown"]["Recurring"] == 800000
    assert analytics["source_breakdown"]["Client A"] == 760000
    assert analytics["data_points"] == 5


def test_revenue_analytics_empty():
    analytics = FinanceAnalyzer().revenue_analytics([])
    assert analytics["total_revenue"] == 0
    assert analytics["growth_rate"] == 0


def test_monthly_totals_sorted_by_month():
    shuffled = list(reversed(sample_revenue))
    assert FinanceAnalyzer.monthly_totals(shuffled) == {
        "2024-01": 770000,
        "2024-02": 830000,
        "2024-03": 410000,
    }


def test_dashboard_kpis():
    kpis = FinanceAnalyzer().dashboard_kpis(sample_revenue, sample_expenses, rng=random.Random(0))
    assert kpis["total_revenue"] == 2010000
    assert kpis["avg_monthly_revenue"] == pytest.approx(2010000 / 12)
    assert kpis["month_over_month_growth"] == -8.9
    assert kpis["total_expenses"] == 117500
    assert kpis["net_profit"] == 2010000 - 117500
    assert len(kpis["predictions"]) == 3


def test_dashboard_kpis_without_history():
    kpis = FinanceAnalyzer().dashboard_kpis([], [])
    assert kpis["month_over_month_growth"] == 0
    assert kpis["net_profit"] == 0
