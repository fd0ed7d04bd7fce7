"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.main import create_app
from app.models import Base


@pytest.fixture
def settings():
    """Settings for an isolated in-memory database on the UTC calendar."""
    return Settings(
        _env_file=None,
        app_env="test",
        database_url="sqlite+aiosqlite:///:memory:",
        business_timezone="UTC",
    )


@pytest.fixture
async def app(settings):
    """FastAPI app with its schema created from the ORM metadata."""
    application = create_app(settings)
    async with application.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield application
    await application.state.engine.dispose()


@pytest.fixture
async def client(app):
    """Async test client for the FastAPI app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def db(app):
    """A session on the same database as the app, for direct inserts."""
    async with app.state.session_factory() as session:
        yield session


@pytest.fixture
def record_sale(client):
    """POST a sale, filling in defaults for anything not given."""

    async def _record(**overrides):
        payload = {
            "customer_name": "John Smith",
            "customer_phone": "08030000001",
            "barber_name": "Mike Johnson",
            "service_type": "Standard Haircut",
            "amount_paid": "40.00",
            "payment_method": "cash",
        }
        payload.update(overrides)
        response = await client.post("/api/v1/sales", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _record


@pytest.fixture
def record_expense(client):
    """POST an expense, filling in defaults for anything not given."""

    async def _record(**overrides):
        payload = {"category": "supplies", "amount": "25.00", "description": "Clippers oil"}
        payload.update(overrides)
        response = await client.post("/api/v1/expenses", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _record
