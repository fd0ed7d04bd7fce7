"""Sale (service record) schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from app.services.catalog import normalize_payment_method, normalize_service_type


class ServiceRecordCreate(BaseModel):
    customer_name: str = Field(min_length=1, max_length=255)
    customer_phone: str = Field(min_length=3, max_length=32)
    barber_name: str = Field(min_length=1, max_length=255)
    service_type: str
    amount_paid: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    payment_method: str  # cash, card, transfer
    service_date: datetime | None = None  # defaults to now
    recorded_by: str | None = None

    @field_validator("customer_name", "customer_phone", "barber_name")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("service_type")
    @classmethod
    def _known_service(cls, value: str) -> str:
        service = normalize_service_type(value)
        if service is None:
            raise ValueError(f"unknown service type {value!r}")
        return service

    @field_validator("payment_method")
    @classmethod
    def _known_payment_method(cls, value: str) -> str:
        method = normalize_payment_method(value)
        if method is None:
            raise ValueError(f"unknown payment method {value!r}")
        return method


class SaleResponse(BaseModel):
    id: int
    customer_id: int
    customer: str
    phone: str
    service: str
    barber: str
    amount: Decimal
    payment_method: str
    date: str  # yyyy-MM-dd, business calendar
    time: str  # h:mm AM/PM
    full_date: datetime


class SalesListResponse(BaseModel):
    data: list[SaleResponse]
    total_amount: Decimal
    count: int
