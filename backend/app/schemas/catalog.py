"""Catalog schemas."""

from pydantic import BaseModel


class PaymentMethodOption(BaseModel):
    value: str
    label: str


class CatalogResponse(BaseModel):
    service_types: list[str]
    expense_categories: list[str]
    payment_methods: list[PaymentMethodOption]
    currency: str
