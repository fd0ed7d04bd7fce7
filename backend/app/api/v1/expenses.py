"""Expense API routes: history and recording an expense."""

from datetime import date
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_business_tz, get_db
from app.core.exceptions import ValidationError
from app.schemas.expense import ExpenseCreate, ExpenseResponse, ExpensesListResponse
from app.services.date_ranges import MonthRange
from app.services.expense_service import ExpenseService

router = APIRouter()


@router.get("", response_model=ExpensesListResponse)
async def list_expenses(
    day: date | None = None,
    month: str | None = Query(None, pattern=r"^\d{4}-\d{2}$"),
    tz: ZoneInfo = Depends(get_business_tz),
    db: AsyncSession = Depends(get_db),
):
    """List expenses, newest first. Filter by ``day`` or by ``month`` (yyyy-mm)."""
    if day and month:
        raise ValidationError("Filter by day or by month, not both")
    try:
        selected_month = MonthRange.parse(month) if month else None
    except ValueError as e:
        raise ValidationError(str(e)) from e
    service = ExpenseService(db, tz)
    return await service.list_expenses(day=day, month=selected_month)


@router.post("", response_model=ExpenseResponse, status_code=201)
async def record_expense(
    data: ExpenseCreate,
    tz: ZoneInfo = Depends(get_business_tz),
    db: AsyncSession = Depends(get_db),
):
    """Record an expense."""
    service = ExpenseService(db, tz)
    return await service.record_expense(data)
