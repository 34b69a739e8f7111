"""Tests for affiliate reports"""
import datetime
from decimal import Decimal

import pytest
import pytz
from django.core.cache import cache
from rest_framework.exceptions import ValidationError

from affiliate import reports
from affiliate.constants import (
    COMMISSION_REPORT_COLUMNS,
    DASHBOARD_STATS_CACHE_KEY,
    TRANSACTION_STATUS_CANCELLED,
    TRANSACTION_STATUS_PAID,
    TRANSACTION_STATUS_PENDING,
)
from affiliate.factories import AffiliateFactory, AffiliateTransactionFactory
from affiliate.ledger import TransactionRecord

NOW = datetime.datetime(2024, 6, 15, 12, 0, tzinfo=pytz.UTC)


def make_transaction(**kwargs):
    """Make a TransactionRecord without touching the database"""
    fields = {
        "id": "1",
        "affiliate_code": "JANE15",
        "affiliate_name": "Jane Doe",
        "affiliate_email": "jane@example.com",
        "order_number": "RDR-1",
        "order_total": Decimal("100.00"),
        "commission_amount": Decimal("10.00"),
        "points_earned": Decimal("1.50"),
        "customer_email": "buyer@example.com",
        "reason": "",
        "status": TRANSACTION_STATUS_PENDING,
        "created_on": NOW,
        **kwargs,
    }
    return TransactionRecord(**fields)


@pytest.fixture
def dated_transactions():
    """Transactions spread over the last year and a half"""
    return {
        name: make_transaction(id=name, created_on=created_on)
        for name, created_on in [
            ("today", NOW),
            ("last_week", NOW - datetime.timedelta(days=7)),
            ("two_months", NOW - datetime.timedelta(days=60)),
            ("new_year", datetime.datetime(2024, 1, 1, tzinfo=pytz.UTC)),
            ("last_year", datetime.datetime(2023, 12, 31, 23, 0, tzinfo=pytz.UTC)),
            ("undated", None),
        ]
    }


@pytest.mark.parametrize(
    "date_range, expected",
    [
        ("all", ["today", "last_week", "two_months", "new_year", "last_year", "undated"]),
        ("last30", ["today", "last_week"]),
        ("last90", ["today", "last_week", "two_months"]),
        ("ytd", ["today", "last_week", "two_months", "new_year"]),
    ],
)
def test_filter_by_date_range(dated_transactions, date_range, expected):
    """Transactions should be kept if they fall within the range"""
    filtered = reports.filter_transactions_by_date_range(
        dated_transactions.values(), date_range, now=NOW
    )
    assert [txn.id for txn in filtered] == expected


def test_filter_by_custom_date_range(dated_transactions):
    """Custom ranges include the whole of the end date"""
    filtered = reports.filter_transactions_by_date_range(
        dated_transactions.values(),
        "custom",
        start=datetime.date(2023, 12, 31),
        end=datetime.date(2024, 1, 1),
        now=NOW,
    )
    assert [txn.id for txn in filtered] == ["new_year", "last_year"]


@pytest.mark.parametrize(
    "date_range, start, end",
    [
        ("forever", None, None),
        ("custom", datetime.date(2024, 2, 1), datetime.date(2024, 1, 1)),
    ],
)
def test_filter_by_date_range_invalid(date_range, start, end):
    """Unknown ranges and backwards custom ranges should be rejected"""
    with pytest.raises(ValidationError):
        reports.filter_transactions_by_date_range(
            [], date_range, start=start, end=end, now=NOW
        )


def test_filter_transactions():
    """Transactions should be filtered by status and a search term"""
    transactions = [
        make_transaction(id="1", order_number="RDR-100"),
        make_transaction(id="2", status=TRANSACTION_STATUS_PAID, customer_email="x@test.com"),
        make_transaction(id="3", affiliate_name="Bob", affiliate_code="BOB20"),
    ]
    assert [
        txn.id
        for txn in reports.filter_transactions(
            transactions, status=TRANSACTION_STATUS_PENDING
        )
    ] == ["1", "3"]
    assert [
        txn.id for txn in reports.filter_transactions(transactions, search=" bob ")
    ] == ["3"]
    assert [
        txn.id for txn in reports.filter_transactions(transactions, search="X@TEST")
    ] == ["2"]
    assert len(reports.filter_transactions(transactions)) == 3


def test_summarize_commissions():
    """Transactions should be totalled per affiliate email"""
    transactions = [
        make_transaction(id="1"),
        make_transaction(
            id="2", affiliate_email="JANE@example.com", status=TRANSACTION_STATUS_PAID
        ),
        make_transaction(id="3", status=TRANSACTION_STATUS_CANCELLED),
        make_transaction(
            id="4",
            affiliate_name="Bob",
            affiliate_email="bob@example.com",
            affiliate_code="BOB20",
            commission_amount=Decimal("5.00"),
        ),
    ]
    jane, bob = reports.summarize_commissions(transactions)
    assert jane == reports.CommissionSummary(
        name="Jane Doe",
        email="jane@example.com",
        code="JANE15",
        total_orders=3,
        total_revenue=Decimal("300.00"),
        total_commission=Decimal("30.00"),
        pending_commission=Decimal("10.00"),
        paid_commission=Decimal("10.00"),
        points_earned=Decimal("4.50"),
    )
    assert bob.code == "BOB20"
    assert bob.pending_commission == Decimal("5.00")


def test_summarize_commissions_adjustments():
    """Points adjustments should count toward points but not toward orders"""
    transactions = [
        make_transaction(id="1"),
        make_transaction(
            id="2",
            order_number="ADJ-0A1B2C3D4E5F",
            order_total=Decimal(0),
            commission_amount=Decimal(0),
            points_earned=Decimal("-5.00"),
            status=TRANSACTION_STATUS_PAID,
        ),
    ]
    [jane] = reports.summarize_commissions(transactions)
    assert jane.total_orders == 1
    assert jane.total_revenue == Decimal("100.00")
    assert jane.points_earned == Decimal("-3.50")


@pytest.mark.django_db
def test_get_dashboard_stats():
    """Dashboard numbers should come from affiliate totals and pending transactions"""
    AffiliateFactory.create(total_points=Decimal("3.45"), total_revenue=Decimal("230"))
    AffiliateFactory.create(
        is_active=False, total_points=Decimal("1.00"), total_revenue=Decimal("50")
    )
    AffiliateTransactionFactory.create(commission_amount=Decimal("23.00"))
    AffiliateTransactionFactory.create(
        commission_amount=Decimal("5.00"), status=TRANSACTION_STATUS_PAID
    )
    stats = reports.get_dashboard_stats()
    assert stats == reports.DashboardStats(
        total_affiliates=2,
        active_affiliates=1,
        total_commission_owed=Decimal("23.00"),
        total_points_issued=Decimal("4.45"),
        total_revenue=Decimal("280.00"),
        total_transactions=2,
    )
    assert cache.get(DASHBOARD_STATS_CACHE_KEY) == stats._asdict()


@pytest.mark.django_db
def test_dashboard_stats_cached_until_ledger_change():
    """Cached numbers should be used until the ledger reports a change"""
    AffiliateFactory.create()
    assert reports.get_dashboard_stats().total_affiliates == 1
    cache.set(
        DASHBOARD_STATS_CACHE_KEY,
        reports.get_dashboard_stats()._replace(total_affiliates=99)._asdict(),
    )
    assert reports.get_dashboard_stats().total_affiliates == 99
    AffiliateFactory.create()
    assert reports.get_dashboard_stats().total_affiliates == 2


def test_commission_report_rows():
    """Rows should be keyed by the report columns with formatted amounts"""
    [summary] = reports.summarize_commissions([make_transaction()])
    assert reports.commission_report_rows([summary]) == [
        dict(
            zip(
                COMMISSION_REPORT_COLUMNS,
                [
                    "Jane Doe",
                    "jane@example.com",
                    "JANE15",
                    1,
                    "100.00",
                    "10.00",
                    "10.00",
                    "0.00",
                    "1.50",
                ],
            )
        )
    ]


def test_commission_report_filename():
    """The filename should include the date"""
    assert (
        reports.commission_report_filename(NOW)
        == "affiliate-commission-report-20240615.csv"
    )
