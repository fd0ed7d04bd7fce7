"""Catalog API route: choices for the record forms."""

from fastapi import APIRouter, Depends

from app.api.deps import get_settings
from app.config import Settings
from app.schemas.catalog import CatalogResponse
from app.services.catalog import EXPENSE_CATEGORIES, PAYMENT_METHODS, SERVICE_TYPES

router = APIRouter()


@router.get("", response_model=CatalogResponse)
async def get_catalog(settings: Settings = Depends(get_settings)):
    """Service types, expense categories and payment methods."""
    return {
        "service_types": SERVICE_TYPES,
        "expense_categories": EXPENSE_CATEGORIES,
        "payment_methods": [{"value": value, "label": label} for value, label in PAYMENT_METHODS.items()],
        "currency": settings.currency,
    }
