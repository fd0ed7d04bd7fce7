"""Expenses history and the "record an expense" write path."""

from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.expense import Expense
from app.schemas.expense import ExpenseCreate
from app.services.date_ranges import MonthRange, as_utc, day_range, local_to_utc, utc_interval
from app.services.ledger import format_clock, format_day, local_time

logger = structlog.get_logger()


class ExpenseService:
    def __init__(self, db: AsyncSession, tz: tzinfo):
        self.db = db
        self.tz = tz

    async def list_expenses(self, day: date | None = None, month: MonthRange | None = None) -> dict:
        """Expenses newest first, optionally limited to one day or one month."""
        query = select(Expense)

        selector = day_range(day) if day else month
        if selector is not None:
            start, end = utc_interval(selector, self.tz)
            query = query.where(Expense.expense_date >= start, Expense.expense_date <= end)

        query = query.order_by(Expense.expense_date.desc(), Expense.id.desc())
        expenses = (await self.db.execute(query)).scalars().all()

        return {
            "data": [self._to_dict(expense) for expense in expenses],
            "total_amount": sum((expense.amount for expense in expenses), Decimal("0")),
            "count": len(expenses),
        }

    async def record_expense(self, data: ExpenseCreate) -> dict:
        expense_date = data.expense_date or datetime.now(timezone.utc)
        expense = Expense(
            category=data.category,
            amount=data.amount,
            description=(data.description or "").strip() or None,
            expense_date=local_to_utc(expense_date, self.tz),
            recorded_by=data.recorded_by,
        )
        self.db.add(expense)
        await self.db.flush()
        await self.db.refresh(expense)

        logger.info("Expense recorded", expense_id=expense.id, category=expense.category, amount=str(expense.amount))
        return self._to_dict(expense)

    def _to_dict(self, expense: Expense) -> dict:
        local = local_time(expense.expense_date, self.tz)
        return {
            "id": expense.id,
            "category": expense.category,
            "amount": expense.amount,
            "description": expense.description or "No description",
            "recorded_by": expense.recorded_by,
            "date": format_day(local),
            "time": format_clock(local),
            "full_date": as_utc(expense.expense_date),
        }
