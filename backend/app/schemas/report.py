"""Report and dashboard schemas."""

from decimal import Decimal

from pydantic import BaseModel


class PeriodItem(BaseModel):
    period: str  # "2026-01-15", "2026-01" or "2026"
    revenue: Decimal
    expenses: Decimal
    profit: Decimal
    customers: int


class MetricsResponse(BaseModel):
    total_revenue: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    profit_margin: float
    unique_customers: int
    avg_customer_value: Decimal
    total_services: int


class CategoryItem(BaseModel):
    label: str
    amount: Decimal
    count: int


class PaymentMethodItem(BaseModel):
    method: str
    amount: Decimal
    percentage: int


class RangeInfo(BaseModel):
    mode: str  # all, month, year, custom
    start: str | None = None
    end: str | None = None


class ReportResponse(BaseModel):
    range: RangeInfo
    view: str
    metrics: MetricsResponse
    chart: list[PeriodItem]
    revenue_by_service: list[CategoryItem]
    expenses_by_category: list[CategoryItem]
    payment_methods: list[PaymentMethodItem]
    available_months: list[str]
    available_years: list[str]
    total_customers: int
    skipped_records: int


class DashboardStats(BaseModel):
    total_revenue: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    total_services: int
    total_customers: int
    monthly_growth: float


class DashboardResponse(BaseModel):
    month: str
    current_month: str
    stats: DashboardStats
    chart: list[PeriodItem]
    available_months: list[str]
