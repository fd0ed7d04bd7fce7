"""Customer records with visit statistics."""

from datetime import tzinfo
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.customer import Customer
from app.models.service_record import ServiceRecord
from app.services.date_ranges import as_utc


class CustomerService:
    def __init__(self, db: AsyncSession, tz: tzinfo):
        self.db = db
        self.tz = tz

    def _visit_stats(self):
        return (
            select(
                ServiceRecord.customer_id,
                func.count(ServiceRecord.id).label("visits"),
                func.sum(ServiceRecord.amount_paid).label("total_spent"),
                func.max(ServiceRecord.service_date).label("last_visit"),
            )
            .group_by(ServiceRecord.customer_id)
            .subquery()
        )

    async def list_customers(self) -> list[dict]:
        """All customers, newest first, with visits and total spent."""
        stats = self._visit_stats()
        query = (
            select(Customer, stats.c.visits, stats.c.total_spent, stats.c.last_visit)
            .outerjoin(stats, stats.c.customer_id == Customer.id)
            .order_by(Customer.created_at.desc(), Customer.id.desc())
        )
        rows = (await self.db.execute(query)).all()
        return [
            self._summary(row.Customer, row.visits, row.total_spent, row.last_visit)
            for row in rows
        ]

    async def get_customer(self, customer_id: int) -> dict:
        """One customer with their full service history, newest first."""
        customer = await self.db.get(Customer, customer_id)
        if not customer:
            raise NotFoundError("Customer")

        result = await self.db.execute(
            select(ServiceRecord)
            .where(ServiceRecord.customer_id == customer_id)
            .order_by(ServiceRecord.service_date.desc(), ServiceRecord.id.desc())
        )
        history = result.scalars().all()

        data = self._summary(
            customer,
            len(history),
            sum((record.amount_paid for record in history), Decimal("0")),
            history[0].service_date if history else None,
        )
        data["created_at"] = as_utc(customer.created_at)
        data["history"] = [
            {
                "id": record.id,
                "service_type": record.service_type,
                "barber_name": record.barber_name,
                "amount_paid": record.amount_paid,
                "payment_method": record.payment_method,
                "service_date": as_utc(record.service_date),
            }
            for record in history
        ]
        return data

    @staticmethod
    def _summary(customer: Customer, visits, total_spent, last_visit) -> dict:
        visits = visits or 0
        return {
            "id": customer.id,
            "name": customer.name,
            "phone": customer.phone,
            "visits": visits,
            "last_visit": as_utc(last_visit) if last_visit else None,
            "total_spent": Decimal(total_spent or 0),
            "has_visits": visits > 0,
        }
