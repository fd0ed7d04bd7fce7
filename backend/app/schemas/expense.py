"""Expense schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from app.services.catalog import normalize_expense_category


class ExpenseCreate(BaseModel):
    category: str  # one of the catalog's expense categories
    amount: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    description: str | None = None
    expense_date: datetime | None = None  # defaults to now
    recorded_by: str | None = None

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str) -> str:
        category = normalize_expense_category(value)
        if category is None:
            raise ValueError(f"unknown expense category {value!r}")
        return category


class ExpenseResponse(BaseModel):
    id: int
    category: str
    amount: Decimal
    description: str
    recorded_by: str | None = None
    date: str
    time: str
    full_date: datetime


class ExpensesListResponse(BaseModel):
    data: list[ExpenseResponse]
    total_amount: Decimal
    count: int
