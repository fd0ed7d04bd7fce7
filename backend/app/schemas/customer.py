"""Customer schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class CustomerSummary(BaseModel):
    id: int
    name: str
    phone: str
    visits: int
    last_visit: datetime | None = None
    total_spent: Decimal
    has_visits: bool


class CustomerVisit(BaseModel):
    id: int
    service_type: str
    barber_name: str
    amount_paid: Decimal
    payment_method: str
    service_date: datetime


class CustomerDetail(CustomerSummary):
    created_at: datetime
    history: list[CustomerVisit]
