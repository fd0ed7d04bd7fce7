"""Bucketing, metrics and breakdowns over in-memory transactions."""

from datetime import date, datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from app.services.aggregation import (
    Granularity,
    aggregate,
    available_periods,
    compute_metrics,
    daily_series,
    expenses_by_category,
    growth_rate,
    payment_method_distribution,
    revenue_by_service,
    round_currency,
)
from app.services.ledger import ExpenseTransaction, ServiceTransaction


def service(when, amount, customer=1, service_type="Standard Haircut", method="cash"):
    return ServiceTransaction(
        date=when,
        amount_paid=Decimal(str(amount)),
        customer_id=customer,
        service_type=service_type,
        payment_method=method,
    )


def expense(when, amount, category="supplies"):
    return ExpenseTransaction(date=when, amount=Decimal(str(amount)), category=category)


MIXED = [
    service(datetime(2025, 2, 3, 9, 15), "12.75", customer=2),
    service(datetime(2024, 12, 31, 23, 59), "40.10", customer=1),
    expense(datetime(2025, 1, 10, 8, 0), "25.55"),
    service(datetime(2025, 1, 5, 10, 30), "40", customer=1),
    expense(datetime(2023, 6, 1, 12, 0), "7.30", category="fuel"),
    service(datetime(2025, 1, 20, 16, 45), "60.49", customer=3),
    service(datetime(2023, 6, 1, 13, 0), "15", customer=1),
]


def test_monthly_bucket_example():
    transactions = [
        service(datetime(2025, 1, 5), 40),
        service(datetime(2025, 1, 20), 60),
        expense(datetime(2025, 1, 10), 25),
    ]

    result = aggregate(transactions, Granularity.MONTH)

    assert len(result) == 1
    bucket = result[0]
    assert bucket.period == "2025-01"
    assert bucket.revenue == Decimal("100")
    assert bucket.expenses == Decimal("25")
    assert bucket.profit == Decimal("75")
    assert bucket.unique_customers == 1


@pytest.mark.parametrize("granularity", list(Granularity))
def test_empty_input_gives_no_buckets(granularity):
    assert aggregate([], granularity) == []


@pytest.mark.parametrize("granularity", list(Granularity))
def test_bucket_totals_match_input_totals(granularity):
    result = aggregate(MIXED, granularity)

    revenue = sum(t.amount_paid for t in MIXED if isinstance(t, ServiceTransaction))
    expenses = sum(t.amount for t in MIXED if isinstance(t, ExpenseTransaction))
    assert sum(b.revenue for b in result) == revenue
    assert sum(b.expenses for b in result) == expenses


@pytest.mark.parametrize("granularity", list(Granularity))
def test_buckets_are_chronological(granularity):
    result = aggregate(MIXED, granularity)

    starts = [b.start for b in result]
    assert starts == sorted(starts)
    assert len(set(starts)) == len(starts)


def test_labels_per_granularity():
    assert [b.period for b in aggregate(MIXED, Granularity.YEAR)] == ["2023", "2024", "2025"]
    assert [b.period for b in aggregate(MIXED, Granularity.MONTH)] == [
        "2023-06",
        "2024-12",
        "2025-01",
        "2025-02",
    ]
    assert [b.period for b in aggregate(MIXED, Granularity.DAY)] == [
        "2023-06-01",
        "2024-12-31",
        "2025-01-05",
        "2025-01-10",
        "2025-01-20",
        "2025-02-03",
    ]


def test_granularity_accepts_plain_strings():
    assert aggregate(MIXED, "year") == aggregate(MIXED, Granularity.YEAR)


def test_aggregate_is_deterministic():
    assert aggregate(MIXED, Granularity.MONTH) == aggregate(list(MIXED), Granularity.MONTH)


def test_customers_are_counted_once_per_bucket():
    transactions = [
        service(datetime(2025, 1, 2), 10, customer="a"),
        service(datetime(2025, 1, 3), 10, customer="a"),
        service(datetime(2025, 1, 4), 10, customer="b"),
        expense(datetime(2025, 1, 5), 10),
        service(datetime(2025, 2, 1), 10, customer="a"),
    ]

    january, february = aggregate(transactions, Granularity.MONTH)

    assert january.unique_customers == 2
    assert february.unique_customers == 1


def test_day_buckets_follow_business_timezone():
    lagos = ZoneInfo("Africa/Lagos")  # UTC+1, no DST
    transactions = [
        service(datetime(2025, 3, 1, 23, 30, tzinfo=timezone.utc), 10),
        # naive values are UTC when a business time zone is given
        service(datetime(2025, 3, 1, 23, 45), 5),
        service(datetime(2025, 3, 1, 22, 0, tzinfo=timezone.utc), 1),
    ]

    result = aggregate(transactions, Granularity.DAY, tz=lagos)

    assert [(b.period, b.revenue) for b in result] == [
        ("2025-03-01", Decimal("1")),
        ("2025-03-02", Decimal("15")),
    ]


def test_invalid_dates_are_skipped():
    transactions = [
        service(None, 10),
        service("not a date", 5),
        service(datetime(2025, 4, 2), 20),
    ]

    result = aggregate(transactions, Granularity.MONTH)

    assert len(result) == 1
    assert result[0].revenue == Decimal("20")


def test_iso_strings_are_accepted_as_dates():
    result = aggregate([service("2025-04-02T10:00:00", 20)], Granularity.DAY)
    assert result[0].period == "2025-04-02"


def test_rounded_summary_uses_whole_units():
    transactions = [
        service(datetime(2025, 1, 1), "10.50"),
        expense(datetime(2025, 1, 2), "2.40"),
    ]

    bucket = aggregate(transactions, Granularity.MONTH)[0].rounded()

    assert bucket.revenue == Decimal("11")
    assert bucket.expenses == Decimal("2")
    assert bucket.profit == Decimal("8")


def test_rounded_loss_ties_round_toward_positive_infinity():
    transactions = [
        service(datetime(2025, 1, 1), "10.00"),
        expense(datetime(2025, 1, 2), "12.50"),
    ]

    bucket = aggregate(transactions, Granularity.MONTH)[0]

    assert bucket.profit == Decimal("-2.50")
    assert bucket.rounded().profit == Decimal("-2")


@pytest.mark.parametrize(
    "value, expected",
    [("2.5", "3"), ("2.49", "2"), ("-2.5", "-2"), ("-2.51", "-3"), ("-0.5", "0"), ("0", "0")],
)
def test_round_currency(value, expected):
    assert round_currency(Decimal(value)) == Decimal(expected)


def test_unknown_transaction_type_is_rejected():
    class Refund:
        date = datetime(2025, 1, 1)

    with pytest.raises(TypeError):
        aggregate([Refund()], Granularity.DAY)
    with pytest.raises(TypeError):
        compute_metrics([Refund()])


# ── Metrics ───────────────────────────────────────


def test_metrics():
    transactions = [
        service(datetime(2025, 1, 1), 100, customer=1),
        service(datetime(2025, 1, 2), 50, customer=2),
        service(datetime(2025, 1, 3), 30, customer=1),
        expense(datetime(2025, 1, 4), 60),
    ]

    metrics = compute_metrics(transactions)

    assert metrics.total_revenue == Decimal("180")
    assert metrics.total_expenses == Decimal("60")
    assert metrics.net_profit == Decimal("120")
    assert metrics.profit_margin == pytest.approx(66.6667, rel=1e-4)
    assert metrics.unique_customers == 2
    assert metrics.avg_customer_value == Decimal("90")
    assert metrics.total_services == 3


def test_metrics_of_nothing_are_zero():
    metrics = compute_metrics([])

    assert metrics.total_revenue == 0
    assert metrics.total_expenses == 0
    assert metrics.net_profit == 0
    assert metrics.profit_margin == 0
    assert metrics.unique_customers == 0
    assert metrics.avg_customer_value == 0
    assert metrics.total_services == 0


def test_margin_without_revenue_is_zero():
    metrics = compute_metrics([expense(datetime(2025, 1, 4), 10)])

    assert metrics.net_profit == Decimal("-10")
    assert metrics.profit_margin == 0.0
    assert metrics.avg_customer_value == 0


# ── Breakdowns ────────────────────────────────────


def test_revenue_by_service_sorted_with_stable_ties():
    transactions = [
        service(datetime(2025, 1, 1), 30, service_type="Shave"),
        service(datetime(2025, 1, 2), 50, service_type="Haircut"),
        expense(datetime(2025, 1, 2), 500, category="rent"),
        service(datetime(2025, 1, 3), 20, service_type="Shave"),
        service(datetime(2025, 1, 4), 70, service_type="Dye"),
    ]

    result = revenue_by_service(transactions)

    assert [(t.label, t.amount, t.count) for t in result] == [
        ("Dye", Decimal("70"), 1),
        ("Shave", Decimal("50"), 2),
        ("Haircut", Decimal("50"), 1),
    ]


def test_expenses_by_category():
    transactions = [
        expense(datetime(2025, 1, 1), 10, category="fuel"),
        expense(datetime(2025, 1, 2), 40, category="electricity"),
        expense(datetime(2025, 1, 3), 15, category="fuel"),
        service(datetime(2025, 1, 3), 99),
    ]

    result = expenses_by_category(transactions)

    assert [(t.label, t.amount, t.count) for t in result] == [
        ("electricity", Decimal("40"), 1),
        ("fuel", Decimal("25"), 2),
    ]


def test_payment_method_distribution():
    transactions = [
        service(datetime(2025, 1, 1), 30, method="card"),
        service(datetime(2025, 1, 2), 50, method="cash"),
        service(datetime(2025, 1, 3), 10, method="transfer"),
        service(datetime(2025, 1, 4), 10, method="cash"),
        expense(datetime(2025, 1, 5), 1000),
    ]

    result = payment_method_distribution(transactions)

    assert [(s.method, s.amount, s.percentage) for s in result] == [
        ("cash", Decimal("60"), 60),
        ("card", Decimal("30"), 30),
        ("transfer", Decimal("10"), 10),
    ]


def test_payment_percentages_round_to_nearest():
    transactions = [
        service(datetime(2025, 1, 1), 1, method="cash"),
        service(datetime(2025, 1, 2), 2, method="card"),
    ]

    result = payment_method_distribution(transactions)

    assert [(s.method, s.percentage) for s in result] == [("card", 67), ("cash", 33)]


def test_payment_percentages_without_revenue():
    assert payment_method_distribution([]) == []
    result = payment_method_distribution([service(datetime(2025, 1, 1), 0, method="cash")])
    assert result[0].percentage == 0


# ── Series and periods ────────────────────────────


def test_daily_series_is_zero_filled():
    transactions = [
        service(datetime(2025, 2, 10, 11, 0), 45),
        expense(datetime(2025, 2, 10, 12, 0), 5),
        service(datetime(2025, 3, 1, 9, 0), 99),
    ]

    series = daily_series(transactions, date(2025, 2, 1), date(2025, 2, 28))

    assert len(series) == 28
    assert series[0].period == "2025-02-01"
    assert series[-1].period == "2025-02-28"
    assert series[9].period == "2025-02-10"
    assert series[9].revenue == Decimal("45")
    assert series[9].profit == Decimal("40")
    assert sum(day.revenue for day in series) == Decimal("45")


def test_available_periods_newest_first():
    assert available_periods(MIXED, Granularity.MONTH) == ["2025-02", "2025-01", "2024-12", "2023-06"]
    assert available_periods(MIXED, Granularity.YEAR) == ["2025", "2024", "2023"]
    assert available_periods([], Granularity.YEAR) == []


def test_growth_rate():
    assert growth_rate(Decimal("150"), Decimal("100")) == 50.0
    assert growth_rate(Decimal("50"), Decimal("100")) == -50.0
    assert growth_rate(Decimal("100"), Decimal("0")) == 0.0
