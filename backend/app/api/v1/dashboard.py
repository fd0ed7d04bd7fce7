"""Dashboard API routes."""

from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_business_tz, get_db
from app.core.exceptions import ValidationError
from app.schemas.report import DashboardResponse
from app.services.dashboard_service import DashboardService
from app.services.date_ranges import MonthRange

router = APIRouter()


@router.get("", response_model=DashboardResponse)
async def overview(
    month: str | None = Query(None, pattern=r"^\d{4}-\d{2}$"),
    tz: ZoneInfo = Depends(get_business_tz),
    db: AsyncSession = Depends(get_db),
):
    """Headline numbers and a daily chart for one month (default: current)."""
    try:
        selected = MonthRange.parse(month) if month else None
    except ValueError as e:
        raise ValidationError(str(e)) from e
    service = DashboardService(db, tz)
    return await service.overview(selected)
