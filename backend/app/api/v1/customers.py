"""Customer API routes."""

from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_business_tz, get_db
from app.schemas.customer import CustomerDetail, CustomerSummary
from app.services.customer_service import CustomerService

router = APIRouter()


@router.get("", response_model=list[CustomerSummary])
async def list_customers(
    tz: ZoneInfo = Depends(get_business_tz),
    db: AsyncSession = Depends(get_db),
):
    """List customers, newest first, with visit counts and total spent."""
    service = CustomerService(db, tz)
    return await service.list_customers()


@router.get("/{customer_id}", response_model=CustomerDetail)
async def get_customer(
    customer_id: int,
    tz: ZoneInfo = Depends(get_business_tz),
    db: AsyncSession = Depends(get_db),
):
    """Get a customer with their service history."""
    service = CustomerService(db, tz)
    return await service.get_customer(customer_id)
