from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel, Field

class ExpenseCategory(str, Enum):
    """Predefined expense categories."""

    FOOD = "Food"
    TRAVEL = "Travel"
    SHOPPING = "Shopping"
    UTILITIES = "Utilities"

    @classmethod
    def values(cls):
        return [category.value for category in cls]

class Expense(BaseModel):
    """A single recorded expense. Instances are never mutated once stored."""

    id: int
    category: ExpenseCategory
    amount: float
    date: str  # YYYY-MM-DD, stored as supplied

    class Config:
        frozen = True
        use_enum_values = True

class AnalysisReport(BaseModel):
    total_spent: float = Field(0, alias="totalSpent")
    highest_spending_category: Optional[str] = Field(None, alias="highestSpendingCategory")
    category_totals: Dict[str, float] = Field(default_factory=dict, alias="categoryTotals")
    monthly_totals: Dict[str, float] = Field(default_factory=dict, alias="monthlyTotals")

    class Config:
        populate_by_name = True

class DailySummary(BaseModel):
    date: str
    total: float
