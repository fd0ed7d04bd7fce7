"""Sales API routes: history and recording a service."""

from datetime import date
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_business_tz, get_db
from app.core.exceptions import ValidationError
from app.schemas.sale import SaleResponse, SalesListResponse, ServiceRecordCreate
from app.services.date_ranges import MonthRange
from app.services.sale_service import SaleService

router = APIRouter()


@router.get("", response_model=SalesListResponse)
async def list_sales(
    day: date | None = None,
    month: str | None = Query(None, pattern=r"^\d{4}-\d{2}$"),
    tz: ZoneInfo = Depends(get_business_tz),
    db: AsyncSession = Depends(get_db),
):
    """List sales, newest first. Filter by ``day`` or by ``month`` (yyyy-mm)."""
    if day and month:
        raise ValidationError("Filter by day or by month, not both")
    try:
        selected_month = MonthRange.parse(month) if month else None
    except ValueError as e:
        raise ValidationError(str(e)) from e
    service = SaleService(db, tz)
    return await service.list_sales(day=day, month=selected_month)


@router.post("", response_model=SaleResponse, status_code=201)
async def record_service(
    data: ServiceRecordCreate,
    tz: ZoneInfo = Depends(get_business_tz),
    db: AsyncSession = Depends(get_db),
):
    """Record a completed service."""
    service = SaleService(db, tz)
    return await service.record_service(data)
