from pydantic import BaseModel, Field
from typing import List, Optional


class ExpenseItem(BaseModel):
    amount: float = Field(ge=0)
    category: Optional[str] = None
    description: Optional[str] = ""


class SpendingInsightRequest(BaseModel):
    expenses: List[ExpenseItem] = Field(default_factory=list)
    monthly_limit: Optional[float] = Field(default=None, ge=0)


class CategoryRequest(BaseModel):
    description: str = ""


class CategorySuggestionPublic(BaseModel):
    category: str
    confidence: int
    description: str
