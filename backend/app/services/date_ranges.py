"""Date-range selectors and the range filter.

A selector is one of ``AllTime``, ``MonthRange``, ``YearRange`` or
``CustomRange``. ``resolve_interval`` turns it into a closed interval of
naive local datetimes (``None`` for all-time) and ``filter_transactions``
keeps the transactions whose local date falls inside, bounds included.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timezone, tzinfo

import structlog

from app.services.ledger import Transaction, with_local_dates

logger = structlog.get_logger()


@dataclass(frozen=True)
class AllTime:
    pass


@dataclass(frozen=True)
class MonthRange:
    year: int
    month: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Invalid month: {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"Invalid year: {self.year}")

    @classmethod
    def parse(cls, value: str) -> "MonthRange":
        """Parse a ``yyyy-mm`` string."""
        try:
            year_str, month_str = value.strip().split("-")
            if len(year_str) != 4 or len(month_str) != 2:
                raise ValueError
            if not (year_str.isdigit() and month_str.isdigit()):
                raise ValueError
            return cls(int(year_str), int(month_str))
        except ValueError:
            raise ValueError(f"Invalid month {value!r}, expected yyyy-mm") from None

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def previous(self) -> "MonthRange":
        if self.month == 1:
            return MonthRange(self.year - 1, 12)
        return MonthRange(self.year, self.month - 1)


@dataclass(frozen=True)
class YearRange:
    year: int

    def __post_init__(self):
        if not 1 <= self.year <= 9999:
            raise ValueError(f"Invalid year: {self.year}")

    @classmethod
    def parse(cls, value: str) -> "YearRange":
        """Parse a ``yyyy`` string."""
        value = value.strip()
        if len(value) != 4 or not value.isdigit():
            raise ValueError(f"Invalid year {value!r}, expected yyyy")
        return cls(int(value))


@dataclass(frozen=True)
class CustomRange:
    """Explicit bounds, both inclusive.

    Naive datetimes are business-local wall time. A plain date stands for the
    whole day: midnight as a start, the last instant of the day as an end.
    """

    start: datetime | date
    end: datetime | date


DateRangeSelector = AllTime | MonthRange | YearRange | CustomRange


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    last_day = calendar.monthrange(year, month)[1]
    return datetime(year, month, 1), datetime(year, month, last_day, 23, 59, 59, 999999)


def _custom_bound(value, day_time: time, tz: tzinfo | None) -> datetime:
    # Naive bounds are already business-local; plain dates cover the whole day
    if isinstance(value, datetime):
        if value.tzinfo is not None and tz is not None:
            value = value.astimezone(tz)
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, day_time)
    raise ValueError(f"Custom range bound must be a date, got {value!r}")


def resolve_interval(
    selector: DateRangeSelector, tz: tzinfo | None = None
) -> tuple[datetime, datetime] | None:
    """Closed ``[start, end]`` interval for a selector, None for all-time."""
    if isinstance(selector, AllTime):
        return None
    if isinstance(selector, MonthRange):
        return month_bounds(selector.year, selector.month)
    if isinstance(selector, YearRange):
        return datetime(selector.year, 1, 1), datetime(selector.year, 12, 31, 23, 59, 59, 999999)
    if isinstance(selector, CustomRange):
        return _custom_bound(selector.start, time.min, tz), _custom_bound(selector.end, time.max, tz)
    raise TypeError(f"Unsupported date range selector: {type(selector).__name__}")


def filter_transactions(
    transactions, selector: DateRangeSelector, tz: tzinfo | None = None
) -> list[Transaction]:
    """Keep the transactions dated inside the selector's interval.

    All-time returns every transaction untouched. A custom range whose start
    is after its end matches nothing.
    """
    interval = resolve_interval(selector, tz)
    if interval is None:
        return list(transactions)

    start, end = interval
    if start > end:
        logger.info("Empty date range", start=start.isoformat(), end=end.isoformat())
        return []

    dated, skipped = with_local_dates(transactions, tz)
    if skipped:
        logger.warning("Transactions with invalid dates excluded from range", count=len(skipped))
    return [txn for moment, txn in dated if start <= moment <= end]


def as_utc(moment: datetime) -> datetime:
    """Aware UTC datetime; naive values read from the database are UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def local_to_utc(moment: datetime, tz: tzinfo) -> datetime:
    """Naive business-local wall time (or any aware datetime) to aware UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=tz)
    return moment.astimezone(timezone.utc)


def utc_interval(selector: DateRangeSelector, tz: tzinfo) -> tuple[datetime, datetime] | None:
    """Selector interval expressed in UTC, for database WHERE clauses."""
    interval = resolve_interval(selector, tz)
    if interval is None:
        return None
    start, end = interval
    return local_to_utc(start, tz), local_to_utc(end, tz)


def day_range(day: date) -> CustomRange:
    return CustomRange(day, day)
