from datetime import date
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from app.models.expense import ExpenseItem


class RevenuePoint(BaseModel):
    amount: float = Field(ge=0)
    date: date
    category: Optional[str] = None
    source: Optional[str] = None
    status: Optional[str] = None
    client_id: Optional[str] = None


class ForecastRequest(BaseModel):
    series: List[RevenuePoint] = Field(default_factory=list)
    horizon: Optional[int] = None
    retention_rate: Optional[float] = Field(default=None, ge=0, le=1)


class RevenueAnalyticsRequest(BaseModel):
    series: List[RevenuePoint] = Field(default_factory=list)
    periods: int = Field(default=6, ge=0, le=24)


class DashboardRequest(BaseModel):
    revenue: List[RevenuePoint] = Field(default_factory=list)
    expenses: List[ExpenseItem] = Field(default_factory=list)


class PredictionPublic(BaseModel):
    period: str
    amount: float
    confidence: int
    change: str
    trend: str
    is_highlighted: bool = False


class RevenueForecastPublic(BaseModel):
    predictions: List[PredictionPublic]
    scenarios: List[Dict[str, Any]]
    key_drivers: List[Dict[str, Any]]
    model_status: Dict[str, Any]
    data_points: int
