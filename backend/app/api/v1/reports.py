"""Report API routes: detailed financial report over a date range."""

from datetime import date, datetime
from typing import Literal
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_business_tz, get_db
from app.core.exceptions import ValidationError
from app.schemas.report import ReportResponse
from app.services.aggregation import Granularity
from app.services.date_ranges import AllTime, CustomRange, DateRangeSelector, MonthRange, YearRange
from app.services.report_service import ReportService

router = APIRouter()


def build_selector(
    mode: str,
    month: str | None,
    year: str | None,
    start: date | None,
    end: date | None,
    today: date,
) -> DateRangeSelector:
    """Translate query parameters into a range selector.

    Month and year default to the current ones. A custom range missing
    either bound covers all time.
    """
    try:
        if mode == "month":
            return MonthRange.parse(month) if month else MonthRange(today.year, today.month)
        if mode == "year":
            return YearRange.parse(year) if year else YearRange(today.year)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    if mode == "custom" and start and end:
        return CustomRange(start, end)
    return AllTime()


@router.get("", response_model=ReportResponse)
async def detailed_report(
    range_mode: Literal["all", "month", "year", "custom"] = Query("month", alias="range"),
    month: str | None = Query(None, pattern=r"^\d{4}-\d{2}$"),
    year: str | None = Query(None, pattern=r"^\d{4}$"),
    start: date | None = None,
    end: date | None = None,
    view: Granularity = Granularity.MONTH,
    tz: ZoneInfo = Depends(get_business_tz),
    db: AsyncSession = Depends(get_db),
):
    """Revenue, expenses, profit and breakdowns for the selected period.

    ``view`` sets the chart bucket size (day, month or year). A custom
    range whose start is after its end yields an empty report.
    """
    selector = build_selector(range_mode, month, year, start, end, datetime.now(tz).date())
    service = ReportService(db, tz)
    return await service.detailed_report(selector, view)
