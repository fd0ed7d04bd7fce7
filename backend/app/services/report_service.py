"""Report service: loads sales and expenses once, filters, aggregates."""

from datetime import tzinfo

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.customer import Customer
from app.models.expense import Expense
from app.models.service_record import ServiceRecord
from app.services.aggregation import (
    Granularity,
    aggregate,
    available_periods,
    compute_metrics,
    expenses_by_category,
    payment_method_distribution,
    revenue_by_service,
    round_cents,
    round_currency,
)
from app.services.date_ranges import (
    AllTime,
    CustomRange,
    DateRangeSelector,
    MonthRange,
    YearRange,
    filter_transactions,
    resolve_interval,
)
from app.services.ledger import ExpenseTransaction, ServiceTransaction, Transaction, with_local_dates

logger = structlog.get_logger()


async def load_transactions(db: AsyncSession) -> list[Transaction]:
    """Every service record and expense as plain transactions, oldest first."""
    service_rows = (
        await db.execute(
            select(
                ServiceRecord.service_date,
                ServiceRecord.amount_paid,
                ServiceRecord.customer_id,
                ServiceRecord.service_type,
                ServiceRecord.payment_method,
            ).order_by(ServiceRecord.service_date.asc(), ServiceRecord.id.asc())
        )
    ).all()
    expense_rows = (
        await db.execute(
            select(Expense.expense_date, Expense.amount, Expense.category).order_by(
                Expense.expense_date.asc(), Expense.id.asc()
            )
        )
    ).all()

    transactions: list[Transaction] = [
        ServiceTransaction(
            date=row.service_date,
            amount_paid=row.amount_paid,
            customer_id=row.customer_id,
            service_type=row.service_type,
            payment_method=row.payment_method,
        )
        for row in service_rows
    ]
    transactions.extend(
        ExpenseTransaction(date=row.expense_date, amount=row.amount, category=row.category)
        for row in expense_rows
    )
    return transactions


async def count_customers(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(Customer.id)))
    return result.scalar() or 0


def period_items(summaries) -> list[dict]:
    """Chart rows, monetary values rounded to whole units."""
    items = []
    for summary in summaries:
        rounded = summary.rounded()
        items.append({
            "period": rounded.period,
            "revenue": rounded.revenue,
            "expenses": rounded.expenses,
            "profit": rounded.profit,
            "customers": rounded.unique_customers,
        })
    return items


def describe_range(selector: DateRangeSelector, tz: tzinfo) -> dict:
    if isinstance(selector, AllTime):
        mode = "all"
    elif isinstance(selector, MonthRange):
        mode = "month"
    elif isinstance(selector, YearRange):
        mode = "year"
    elif isinstance(selector, CustomRange):
        mode = "custom"
    else:
        raise TypeError(f"Unsupported date range selector: {type(selector).__name__}")

    interval = resolve_interval(selector, tz)
    if interval is None:
        return {"mode": mode, "start": None, "end": None}
    start, end = interval
    return {"mode": mode, "start": start.isoformat(), "end": end.isoformat()}


class ReportService:
    def __init__(self, db: AsyncSession, tz: tzinfo):
        self.db = db
        self.tz = tz

    async def detailed_report(
        self,
        selector: DateRangeSelector,
        view: Granularity = Granularity.MONTH,
    ) -> dict:
        """Metrics, chart buckets and breakdowns for one date range."""
        loaded = await load_transactions(self.db)
        total_customers = await count_customers(self.db)

        # Records with unreadable dates never reach the filter or the buckets
        dated, skipped = with_local_dates(loaded, self.tz)
        if skipped:
            logger.warning("Records with invalid dates excluded from report", count=len(skipped))
        transactions = [txn for _, txn in dated]

        selected = filter_transactions(transactions, selector, self.tz)
        metrics = compute_metrics(selected)

        logger.info(
            "Report computed",
            range=type(selector).__name__,
            view=view.value,
            loaded=len(loaded),
            selected=len(selected),
        )

        return {
            "range": describe_range(selector, self.tz),
            "view": view.value,
            "metrics": {
                "total_revenue": metrics.total_revenue,
                "total_expenses": metrics.total_expenses,
                "net_profit": metrics.net_profit,
                "profit_margin": round(metrics.profit_margin, 2),
                "unique_customers": metrics.unique_customers,
                "avg_customer_value": round_cents(metrics.avg_customer_value),
                "total_services": metrics.total_services,
            },
            "chart": period_items(aggregate(selected, view, self.tz)),
            "revenue_by_service": [
                {"label": t.label, "amount": round_currency(t.amount), "count": t.count}
                for t in revenue_by_service(selected)
            ],
            "expenses_by_category": [
                {"label": t.label, "amount": round_currency(t.amount), "count": t.count}
                for t in expenses_by_category(selected)
            ],
            "payment_methods": [
                {"method": s.method, "amount": round_currency(s.amount), "percentage": s.percentage}
                for s in payment_method_distribution(selected)
            ],
            "available_months": available_periods(transactions, Granularity.MONTH, self.tz),
            "available_years": available_periods(transactions, Granularity.YEAR, self.tz),
            "total_customers": total_customers,
            "skipped_records": len(skipped),
        }
