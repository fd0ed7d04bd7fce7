"""In-memory transactions fed to the reporting pipeline.

A transaction is either a service sold to a customer (revenue) or an
expense. Both variants carry a ``date``; everything else differs, so code
that consumes a ``Transaction`` dispatches on the concrete class and raises
``TypeError`` for anything it does not know.

Dates are compared and bucketed on the business calendar: ``local_time``
turns whatever the data layer produced into a naive wall-clock datetime in
the business time zone, or ``None`` when the value cannot be read as a date.
"""

from dataclasses import dataclass
from datetime import date as date_type
from datetime import datetime, time, timezone, tzinfo
from decimal import Decimal


@dataclass(frozen=True)
class ServiceTransaction:
    date: datetime | None
    amount_paid: Decimal
    customer_id: int | str
    service_type: str
    payment_method: str


@dataclass(frozen=True)
class ExpenseTransaction:
    date: datetime | None
    amount: Decimal
    category: str


Transaction = ServiceTransaction | ExpenseTransaction


def amount_of(txn: Transaction) -> Decimal:
    """Monetary value of a transaction, whichever variant it is."""
    if isinstance(txn, ServiceTransaction):
        return txn.amount_paid
    if isinstance(txn, ExpenseTransaction):
        return txn.amount
    raise TypeError(f"Unsupported transaction type: {type(txn).__name__}")


def local_time(value, tz: tzinfo | None = None) -> datetime | None:
    """Return ``value`` as a naive datetime on the business calendar.

    - aware datetimes are converted to ``tz`` (kept as-is when ``tz`` is None)
    - naive datetimes are UTC when ``tz`` is given, already local otherwise
    - plain dates are midnight of that calendar day
    - ISO-8601 strings are parsed first
    - anything else (None, garbage) gives None
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            return None

    if isinstance(value, datetime):
        if tz is not None:
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            value = value.astimezone(tz)
        return value.replace(tzinfo=None)

    if isinstance(value, date_type):
        return datetime.combine(value, time.min)

    return None


def with_local_dates(
    transactions, tz: tzinfo | None = None
) -> tuple[list[tuple[datetime, Transaction]], list[Transaction]]:
    """Pair each transaction with its local datetime.

    Returns ``(dated, skipped)``; ``skipped`` holds the transactions whose
    date could not be read.
    """
    dated: list[tuple[datetime, Transaction]] = []
    skipped: list[Transaction] = []
    for txn in transactions:
        moment = local_time(txn.date, tz)
        if moment is None:
            skipped.append(txn)
        else:
            dated.append((moment, txn))
    return dated, skipped


def format_day(moment: datetime) -> str:
    return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"


def format_clock(moment: datetime) -> str:
    """12-hour clock, e.g. ``10:30 AM``."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"
