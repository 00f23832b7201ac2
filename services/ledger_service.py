import math
from typing import Dict, List, Optional
from datetime import date, datetime, timezone
from core.exceptions import InvalidAmountError, InvalidCategoryError
from models.models import AnalysisReport, DailySummary, Expense, ExpenseCategory
from utils.logger import logger

DATE_FORMAT = "%Y-%m-%d"

def today_iso() -> str:
    """Current UTC date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).strftime(DATE_FORMAT)

def parse_date(value: str) -> Optional[date]:
    """Parse an ISO date string, returning None when it is not a valid date."""
    try:
        return datetime.fromisoformat(value).date()
    except (TypeError, ValueError):
        return None

class LedgerService:
    """Service for recording expenses and computing spending analytics.

    Expenses live in an append-only in-memory list owned by this instance.
    Every method runs to completion without awaiting, so callers on a single
    event loop never observe a partially applied change.
    """

    def __init__(self):
        self.expenses_db: List[Expense] = []

    @property
    def count(self) -> int:
        return len(self.expenses_db)

    async def add_expense(self, category: str, amount: float, expense_date: Optional[str] = None) -> Expense:
        """Validate and append a new expense.

        Raises:
            InvalidCategoryError: category is not a predefined category.
            InvalidAmountError: amount is not a finite number greater than zero.
        """
        if category not in ExpenseCategory.values():
            logger.warning(f"Rejected expense with invalid category: {category!r}")
            raise InvalidCategoryError()
        # Finite and strictly positive; NaN fails every comparison
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not (math.isfinite(amount) and amount > 0):
            logger.warning(f"Rejected expense with invalid amount: {amount!r}")
            raise InvalidAmountError()

        # Dates are stored verbatim; only the empty value falls back to today
        expense = Expense(
            id=len(self.expenses_db) + 1,
            category=category,
            amount=amount,
            date=expense_date or today_iso(),
        )
        self.expenses_db.append(expense)

        logger.info(f"Created expense: {expense.id} ({expense.category} {expense.amount} on {expense.date})")
        return expense

    async def get_expenses(
        self,
        category: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Expense]:
        """Return expenses matching every given filter, in insertion order."""
        expenses = list(self.expenses_db)

        if category:
            expenses = [e for e in expenses if e.category == category]

        if start_date or end_date:
            start = parse_date(start_date) if start_date else None
            end = parse_date(end_date) if end_date else None

            # An unparseable bound cannot be compared against, so nothing matches
            if (start_date and start is None) or (end_date and end is None):
                logger.warning(f"Ignoring unparseable date range: start={start_date!r} end={end_date!r}")
                return []

            expenses = [e for e in expenses if self._in_range(e, start, end)]

        return expenses

    def _in_range(self, expense: Expense, start: Optional[date], end: Optional[date]) -> bool:
        expense_date = parse_date(expense.date)
        if expense_date is None:
            logger.warning(f"Expense {expense.id} has unparseable date {expense.date!r}")
            return False
        return (start is None or start <= expense_date) and (end is None or expense_date <= end)

    async def analyze_spending(self) -> AnalysisReport:
        """Compute total, per-category and per-month spending.

        Ties for the highest spending category go to the category that was
        recorded first.
        """
        total_spent = 0
        category_totals: Dict[str, float] = {}
        monthly_totals: Dict[str, float] = {}

        for expense in list(self.expenses_db):
            total_spent += expense.amount
            category_totals[expense.category] = category_totals.get(expense.category, 0) + expense.amount
            month = expense.date[:7]
            monthly_totals[month] = monthly_totals.get(month, 0) + expense.amount

        # max() keeps the first of equal totals, and dicts keep insertion order
        highest = max(category_totals, key=category_totals.get) if category_totals else None

        return AnalysisReport(
            total_spent=total_spent,
            highest_spending_category=highest,
            category_totals=category_totals,
            monthly_totals=monthly_totals,
        )

    async def daily_summary(self, today: Optional[str] = None) -> DailySummary:
        """Sum the expenses recorded for ``today`` (defaults to the current UTC date)."""
        today = today or today_iso()
        total = sum(e.amount for e in list(self.expenses_db) if e.date == today)
        return DailySummary(date=today, total=total)
