"""Expenses history and expense recording."""

from decimal import Decimal

import pytest

from app.services.catalog import EXPENSE_CATEGORIES


@pytest.mark.asyncio
async def test_record_expense(record_expense):
    expense = await record_expense(category="fuel", amount="12.40", expense_date="2025-03-04T18:15:00")

    assert expense["category"] == "fuel"
    assert Decimal(expense["amount"]) == Decimal("12.40")
    assert expense["description"] == "Clippers oil"
    assert expense["date"] == "2025-03-04"
    assert expense["time"] == "6:15 PM"


@pytest.mark.asyncio
async def test_expense_without_description(record_expense):
    expense = await record_expense(description=None)
    assert expense["description"] == "No description"


@pytest.mark.asyncio
@pytest.mark.parametrize("override", [{"category": "rent"}, {"amount": "-5"}, {"amount": "abc"}])
async def test_invalid_expense_is_rejected(client, override):
    payload = {"category": "supplies", "amount": "25.00"}
    payload.update(override)

    response = await client.post("/api/v1/expenses", json=payload)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_expenses_by_month(client, record_expense):
    await record_expense(expense_date="2025-01-10T08:00:00", amount="25")
    await record_expense(expense_date="2025-01-31T23:59:00", amount="5", category="electricity")
    await record_expense(expense_date="2025-02-01T00:00:00", amount="100")

    response = await client.get("/api/v1/expenses", params={"month": "2025-01"})

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert [row["category"] for row in data["data"]] == ["electricity", "supplies"]
    assert Decimal(data["total_amount"]) == Decimal("30")

    response = await client.get("/api/v1/expenses", params={"day": "2025-02-01"})
    assert response.json()["count"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("category", EXPENSE_CATEGORIES)
async def test_every_catalog_category_is_accepted(record_expense, category):
    expense = await record_expense(category=category.upper())
    assert expense["category"] == category
