from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import List, Optional
from core.dependencies import get_ledger_service
from core.exceptions import ExpenseValidationError
from models.models import AnalysisReport, Expense
from services.ledger_service import LedgerService
from utils.logger import logger

router = APIRouter()

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

# Pydantic models
class ExpenseCreate(BaseModel):
    category: str
    amount: float = Field(..., strict=True, allow_inf_nan=False)
    date: Optional[str] = None

class ExpenseEnvelope(BaseModel):
    status: str
    data: Optional[Expense] = None
    error: Optional[str] = None

class ExpenseListEnvelope(BaseModel):
    status: str
    data: List[Expense] = []
    error: Optional[str] = None

class AnalysisEnvelope(BaseModel):
    status: str
    data: Optional[AnalysisReport] = None
    error: Optional[str] = None

def error_envelope(message: str) -> dict:
    return {"status": STATUS_ERROR, "data": None, "error": message}

async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests inside the envelope with a 200 status."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    logger.warning(f"Invalid request to {request.url.path}: {message}")
    return JSONResponse(status_code=200, content=error_envelope(message))

@router.post("/expenses", response_model=ExpenseEnvelope)
async def create_expense(
    expense_data: ExpenseCreate,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Create a new expense."""
    try:
        expense = await ledger.add_expense(
            category=expense_data.category,
            amount=expense_data.amount,
            expense_date=expense_data.date,
        )
        return ExpenseEnvelope(status=STATUS_SUCCESS, data=expense)

    except ExpenseValidationError as e:
        return ExpenseEnvelope(status=STATUS_ERROR, error=str(e))
    except Exception as e:
        logger.error(f"Create expense error: {e}")
        return ExpenseEnvelope(status=STATUS_ERROR, error=str(e))

@router.get("/expenses", response_model=ExpenseListEnvelope)
async def get_expenses(
    category: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Get expenses, optionally filtered by category and an inclusive date range."""
    try:
        expenses = await ledger.get_expenses(
            category=category,
            start_date=start_date,
            end_date=end_date,
        )
        return ExpenseListEnvelope(status=STATUS_SUCCESS, data=expenses)

    except Exception as e:
        logger.error(f"Get expenses error: {e}")
        return ExpenseListEnvelope(status=STATUS_ERROR, error=str(e))

@router.get("/expenses/analysis", response_model=AnalysisEnvelope)
async def analyze_expenses(
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Get total, per-category and per-month spending."""
    try:
        report = await ledger.analyze_spending()
        return AnalysisEnvelope(status=STATUS_SUCCESS, data=report)

    except Exception as e:
        logger.error(f"Analyze expenses error: {e}")
        return AnalysisEnvelope(status=STATUS_ERROR, error=str(e))
