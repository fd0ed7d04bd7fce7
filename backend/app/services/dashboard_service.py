"""Dashboard overview: one month's headline numbers and daily chart."""

from datetime import date, datetime, tzinfo

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.aggregation import (
    Granularity,
    available_periods,
    compute_metrics,
    daily_series,
    growth_rate,
)
from app.services.date_ranges import MonthRange, filter_transactions, month_bounds
from app.services.report_service import count_customers, load_transactions, period_items

logger = structlog.get_logger()


class DashboardService:
    def __init__(self, db: AsyncSession, tz: tzinfo, today: date | None = None):
        self.db = db
        self.tz = tz
        self.today = today or datetime.now(tz).date()

    @property
    def current_month(self) -> MonthRange:
        return MonthRange(self.today.year, self.today.month)

    async def overview(self, month: MonthRange | None = None) -> dict:
        """Stats for ``month`` (default: current month) compared to the month before."""
        month = month or self.current_month
        transactions = await load_transactions(self.db)
        total_customers = await count_customers(self.db)

        in_month = filter_transactions(transactions, month, self.tz)
        previous = compute_metrics(filter_transactions(transactions, month.previous(), self.tz))
        metrics = compute_metrics(in_month)

        first, last = month_bounds(month.year, month.month)
        chart = daily_series(in_month, first.date(), last.date(), self.tz)

        logger.info("Dashboard computed", month=month.label, services=metrics.total_services)

        return {
            "month": month.label,
            "current_month": self.current_month.label,
            "stats": {
                "total_revenue": metrics.total_revenue,
                "total_expenses": metrics.total_expenses,
                "net_profit": metrics.net_profit,
                "total_services": metrics.total_services,
                "total_customers": total_customers,
                "monthly_growth": round(growth_rate(metrics.total_revenue, previous.total_revenue), 2),
            },
            "chart": period_items(chart),
            "available_months": available_periods(transactions, Granularity.MONTH, self.tz),
        }
