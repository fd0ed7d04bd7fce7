"""Sales history and the "record a service" write path."""

from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.customer import Customer
from app.models.service_record import ServiceRecord
from app.schemas.sale import ServiceRecordCreate
from app.services.date_ranges import MonthRange, as_utc, day_range, local_to_utc, utc_interval
from app.services.ledger import format_clock, format_day, local_time

logger = structlog.get_logger()


class SaleService:
    def __init__(self, db: AsyncSession, tz: tzinfo):
        self.db = db
        self.tz = tz

    async def list_sales(self, day: date | None = None, month: MonthRange | None = None) -> dict:
        """Sales newest first, optionally limited to one day or one month."""
        query = select(ServiceRecord).options(selectinload(ServiceRecord.customer))

        selector = day_range(day) if day else month
        if selector is not None:
            start, end = utc_interval(selector, self.tz)
            query = query.where(ServiceRecord.service_date >= start, ServiceRecord.service_date <= end)

        query = query.order_by(ServiceRecord.service_date.desc(), ServiceRecord.id.desc())
        records = (await self.db.execute(query)).scalars().all()

        data = [self._to_dict(record) for record in records]
        return {
            "data": data,
            "total_amount": sum((record.amount_paid for record in records), Decimal("0")),
            "count": len(data),
        }

    async def record_service(self, data: ServiceRecordCreate) -> dict:
        """Persist a completed service, creating the customer on first visit."""
        customer = await self._get_or_create_customer(data.customer_name, data.customer_phone)

        service_date = data.service_date or datetime.now(timezone.utc)
        record = ServiceRecord(
            customer=customer,
            barber_name=data.barber_name,
            service_type=data.service_type,
            amount_paid=data.amount_paid,
            payment_method=data.payment_method,
            service_date=local_to_utc(service_date, self.tz),
            recorded_by=data.recorded_by,
        )
        self.db.add(record)
        await self.db.flush()

        logger.info(
            "Service recorded",
            service_record_id=record.id,
            customer_id=customer.id,
            service_type=record.service_type,
            amount=str(record.amount_paid),
        )
        return self._to_dict(record)

    async def _find_customer(self, phone: str) -> Customer | None:
        result = await self.db.execute(select(Customer).where(Customer.phone == phone))
        return result.scalar_one_or_none()

    async def _get_or_create_customer(self, name: str, phone: str) -> Customer:
        customer = await self._find_customer(phone)

        if customer is None:
            try:
                async with self.db.begin_nested():
                    customer = Customer(name=name, phone=phone)
                    self.db.add(customer)
                logger.info("Customer created", customer_id=customer.id)
            except IntegrityError:
                # Another request registered the same phone since the lookup
                logger.info("Customer created concurrently, reusing it", phone=phone)
                customer = await self._find_customer(phone)
                if customer is None:
                    raise

        if customer.name != name:
            customer.name = name
            await self.db.flush()
        return customer

    def _to_dict(self, record: ServiceRecord) -> dict:
        local = local_time(record.service_date, self.tz)
        return {
            "id": record.id,
            "customer_id": record.customer_id,
            "customer": record.customer.name,
            "phone": record.customer.phone,
            "service": record.service_type,
            "barber": record.barber_name,
            "amount": record.amount_paid,
            "payment_method": record.payment_method,
            "date": format_day(local),
            "time": format_clock(local),
            "full_date": as_utc(record.service_date),
        }
