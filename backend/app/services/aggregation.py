"""Aggregation of transactions into period buckets and report metrics.

Everything here is a pure function over an in-memory list of transactions.
Monetary sums stay exact ``Decimal`` values; ``round_currency`` is applied
by the callers that build chart output.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, tzinfo
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from enum import Enum

import structlog

from app.services.ledger import (
    ExpenseTransaction,
    ServiceTransaction,
    Transaction,
    amount_of,
    with_local_dates,
)

logger = structlog.get_logger()

ZERO = Decimal("0")


class Granularity(str, Enum):
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


def round_currency(value: Decimal) -> Decimal:
    """Round to whole currency units, ties toward positive infinity (-2.5 gives -2)."""
    return (Decimal(value) + Decimal("0.5")).quantize(Decimal("1"), rounding=ROUND_FLOOR)


def round_cents(value: Decimal) -> Decimal:
    return Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def round_percentage(value: Decimal | float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def period_start(moment: datetime | date, granularity: Granularity) -> date:
    day = moment.date() if isinstance(moment, datetime) else moment
    if granularity == Granularity.DAY:
        return day
    if granularity == Granularity.MONTH:
        return day.replace(day=1)
    if granularity == Granularity.YEAR:
        return day.replace(month=1, day=1)
    raise ValueError(f"Unknown granularity: {granularity}")


def period_label(start: date, granularity: Granularity) -> str:
    """Fixed-width label: ``yyyy-MM-dd``, ``yyyy-MM`` or ``yyyy``."""
    if granularity == Granularity.DAY:
        return f"{start.year:04d}-{start.month:02d}-{start.day:02d}"
    if granularity == Granularity.MONTH:
        return f"{start.year:04d}-{start.month:02d}"
    if granularity == Granularity.YEAR:
        return f"{start.year:04d}"
    raise ValueError(f"Unknown granularity: {granularity}")


@dataclass(frozen=True)
class PeriodSummary:
    period: str
    start: date
    revenue: Decimal
    expenses: Decimal
    profit: Decimal
    unique_customers: int

    def rounded(self) -> "PeriodSummary":
        """Copy with monetary values rounded to whole units."""
        return replace(
            self,
            revenue=round_currency(self.revenue),
            expenses=round_currency(self.expenses),
            profit=round_currency(self.revenue - self.expenses),
        )


@dataclass(frozen=True)
class ReportMetrics:
    total_revenue: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    profit_margin: float
    unique_customers: int
    avg_customer_value: Decimal
    total_services: int


@dataclass(frozen=True)
class CategoryTotal:
    label: str
    amount: Decimal
    count: int


@dataclass(frozen=True)
class PaymentMethodShare:
    method: str
    amount: Decimal
    percentage: int


class _Bucket:
    __slots__ = ("revenue", "expenses", "customers")

    def __init__(self):
        self.revenue = ZERO
        self.expenses = ZERO
        self.customers: set = set()

    def add(self, txn: Transaction) -> None:
        if isinstance(txn, ServiceTransaction):
            self.revenue += txn.amount_paid
            self.customers.add(txn.customer_id)
        elif isinstance(txn, ExpenseTransaction):
            self.expenses += txn.amount
        else:
            raise TypeError(f"Unsupported transaction type: {type(txn).__name__}")

    def summary(self, start: date, granularity: Granularity) -> PeriodSummary:
        return PeriodSummary(
            period=period_label(start, granularity),
            start=start,
            revenue=self.revenue,
            expenses=self.expenses,
            profit=self.revenue - self.expenses,
            unique_customers=len(self.customers),
        )


def _bucketize(transactions, granularity: Granularity, tz: tzinfo | None) -> dict[date, _Bucket]:
    dated, skipped = with_local_dates(transactions, tz)
    if skipped:
        logger.warning("Transactions with invalid dates skipped from buckets", count=len(skipped))

    buckets: dict[date, _Bucket] = {}
    for moment, txn in dated:
        key = period_start(moment, granularity)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = _Bucket()
        bucket.add(txn)
    return buckets


def aggregate(
    transactions, granularity: Granularity, tz: tzinfo | None = None
) -> list[PeriodSummary]:
    """Group transactions into calendar buckets, oldest period first."""
    granularity = Granularity(granularity)
    buckets = _bucketize(transactions, granularity, tz)
    return [buckets[start].summary(start, granularity) for start in sorted(buckets)]


def daily_series(
    transactions, start: date, end: date, tz: tzinfo | None = None
) -> list[PeriodSummary]:
    """One summary per calendar day from ``start`` to ``end``, zero-filled."""
    buckets = _bucketize(transactions, Granularity.DAY, tz)
    series = []
    day = start
    while day <= end:
        bucket = buckets.get(day) or _Bucket()
        series.append(bucket.summary(day, Granularity.DAY))
        day += timedelta(days=1)
    return series


def available_periods(
    transactions, granularity: Granularity, tz: tzinfo | None = None
) -> list[str]:
    """Distinct period labels present in the data, newest first."""
    granularity = Granularity(granularity)
    dated, _ = with_local_dates(transactions, tz)
    starts = {period_start(moment, granularity) for moment, _ in dated}
    return [period_label(start, granularity) for start in sorted(starts, reverse=True)]


def compute_metrics(transactions) -> ReportMetrics:
    """Scalar totals over the whole (already filtered) set."""
    total_revenue = ZERO
    total_expenses = ZERO
    customers = set()
    total_services = 0

    for txn in transactions:
        if isinstance(txn, ServiceTransaction):
            total_revenue += txn.amount_paid
            customers.add(txn.customer_id)
            total_services += 1
        elif isinstance(txn, ExpenseTransaction):
            total_expenses += txn.amount
        else:
            raise TypeError(f"Unsupported transaction type: {type(txn).__name__}")

    net_profit = total_revenue - total_expenses
    profit_margin = float(net_profit / total_revenue * 100) if total_revenue > 0 else 0.0
    avg_customer_value = total_revenue / len(customers) if customers else ZERO

    return ReportMetrics(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_profit=net_profit,
        profit_margin=profit_margin,
        unique_customers=len(customers),
        avg_customer_value=avg_customer_value,
        total_services=total_services,
    )


def _group_totals(pairs) -> list[CategoryTotal]:
    # dicts keep insertion order and sorted() is stable: ties stay first-seen
    groups: dict[str, list] = {}
    for label, amount in pairs:
        entry = groups.setdefault(label, [ZERO, 0])
        entry[0] += amount
        entry[1] += 1
    totals = [CategoryTotal(label=label, amount=amount, count=count) for label, (amount, count) in groups.items()]
    return sorted(totals, key=lambda t: t.amount, reverse=True)


def revenue_by_service(transactions) -> list[CategoryTotal]:
    """Revenue per service type, largest first."""
    return _group_totals(
        (txn.service_type, txn.amount_paid)
        for txn in transactions
        if isinstance(txn, ServiceTransaction)
    )


def expenses_by_category(transactions) -> list[CategoryTotal]:
    """Spending per expense category, largest first."""
    return _group_totals(
        (txn.category, txn.amount)
        for txn in transactions
        if isinstance(txn, ExpenseTransaction)
    )


def payment_method_distribution(transactions) -> list[PaymentMethodShare]:
    """Revenue per payment method with its share of the total."""
    groups: dict[str, Decimal] = {}
    for txn in transactions:
        if isinstance(txn, ServiceTransaction):
            groups[txn.payment_method] = groups.get(txn.payment_method, ZERO) + amount_of(txn)

    total = sum(groups.values(), ZERO)
    shares = [
        PaymentMethodShare(
            method=method,
            amount=amount,
            percentage=round_percentage(amount / total * 100) if total > 0 else 0,
        )
        for method, amount in groups.items()
    ]
    return sorted(shares, key=lambda s: s.amount, reverse=True)


def growth_rate(current: Decimal, previous: Decimal) -> float:
    """Percentage change from ``previous`` to ``current``; 0 without a baseline."""
    if previous > 0:
        return float((current - previous) / previous * 100)
    return 0.0
