"""SQLAlchemy models."""

from app.models.base import Base
from app.models.customer import Customer
from app.models.expense import Expense
from app.models.service_record import ServiceRecord

__all__ = [
    "Base",
    "Customer",
    "ServiceRecord",
    "Expense",
]
