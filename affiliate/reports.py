"""Commission reporting for the affiliate program"""
import datetime
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import NamedTuple

import pytz
from django.conf import settings
from django.core.cache import cache
from rest_framework.exceptions import ValidationError

from affiliate.constants import (
    ADJUSTMENT_ORDER_NUMBER_PREFIX,
    COMMISSION_REPORT_COLUMNS,
    COMMISSION_REPORT_FILENAME_PREFIX,
    DASHBOARD_STATS_CACHE_KEY,
    DATE_RANGE_ALL,
    DATE_RANGE_LAST_30_DAYS,
    DATE_RANGE_LAST_90_DAYS,
    DATE_RANGE_YEAR_TO_DATE,
    DATE_RANGES,
    TRANSACTION_STATUS_PAID,
    TRANSACTION_STATUS_PENDING,
)
from affiliate.ledger import get_ledger
from storefront.utils import format_datetime_for_filename, format_price, now_in_utc

log = logging.getLogger(__name__)


class CommissionSummary(NamedTuple):
    """Commission totals for one affiliate over a set of transactions"""

    name: str
    email: str
    code: str
    total_orders: int
    total_revenue: Decimal
    total_commission: Decimal
    pending_commission: Decimal
    paid_commission: Decimal
    points_earned: Decimal


class DashboardStats(NamedTuple):
    """Program-wide numbers for the affiliate admin dashboard"""

    total_affiliates: int
    active_affiliates: int
    total_commission_owed: Decimal
    total_points_issued: Decimal
    total_revenue: Decimal
    total_transactions: int


def filter_transactions_by_date_range(
    transactions, date_range, start=None, end=None, now=None
):
    """
    Keep the transactions created within a date range

    Args:
        transactions (iterable of TransactionRecord): Transactions to filter
        date_range (str): One of DATE_RANGES
        start (datetime.date): First day of a custom range, unbounded if None
        end (datetime.date): Last day of a custom range (inclusive), up to now if None
        now (datetime.datetime): The current time

    Returns:
        list of TransactionRecord: The transactions within the range
    """
    if date_range not in DATE_RANGES:
        raise ValidationError({"date_range": f"Unknown date range {date_range}"})
    if date_range == DATE_RANGE_ALL:
        return list(transactions)

    now = now or now_in_utc()
    if date_range == DATE_RANGE_YEAR_TO_DATE:
        lower = datetime.datetime(now.year, 1, 1, tzinfo=pytz.UTC)
        upper = None
    elif date_range == DATE_RANGE_LAST_30_DAYS:
        lower, upper = now - datetime.timedelta(days=30), None
    elif date_range == DATE_RANGE_LAST_90_DAYS:
        lower, upper = now - datetime.timedelta(days=90), None
    else:
        lower = (
            datetime.datetime.combine(start, datetime.time.min, tzinfo=pytz.UTC)
            if start
            else None
        )
        upper = (
            datetime.datetime.combine(end, datetime.time(23, 59, 59), tzinfo=pytz.UTC)
            if end
            else now
        )
        if lower and upper and lower > upper:
            raise ValidationError({"date_range": "Start date must come before end date"})

    return [
        txn
        for txn in transactions
        if txn.created_on is not None
        and (lower is None or txn.created_on >= lower)
        and (upper is None or txn.created_on <= upper)
    ]


def filter_transactions(transactions, *, status=None, search=None):
    """
    Keep transactions with a status, and/or matching a search term in the order number,
    affiliate code, affiliate name or customer email
    """
    search = (search or "").strip().lower()
    return [
        txn
        for txn in transactions
        if (not status or txn.status == status)
        and (
            not search
            or any(
                search in (value or "").lower()
                for value in (
                    txn.order_number,
                    txn.affiliate_code,
                    txn.affiliate_name,
                    txn.customer_email,
                )
            )
        )
    ]


def summarize_commissions(transactions):
    """
    Total up transactions per affiliate

    Args:
        transactions (iterable of TransactionRecord): Transactions to summarize

    Returns:
        list of CommissionSummary: One summary per affiliate, in order of first appearance
    """
    summaries = OrderedDict()
    for txn in transactions:
        key = txn.affiliate_email.lower()
        summary = summaries.get(key) or CommissionSummary(
            name=txn.affiliate_name,
            email=txn.affiliate_email,
            code=txn.affiliate_code,
            total_orders=0,
            total_revenue=Decimal(0),
            total_commission=Decimal(0),
            pending_commission=Decimal(0),
            paid_commission=Decimal(0),
            points_earned=Decimal(0),
        )
        # Points adjustments are not orders
        is_order = not txn.order_number.startswith(ADJUSTMENT_ORDER_NUMBER_PREFIX)
        summaries[key] = summary._replace(
            total_orders=summary.total_orders + (1 if is_order else 0),
            total_revenue=summary.total_revenue + txn.order_total,
            total_commission=summary.total_commission + txn.commission_amount,
            pending_commission=summary.pending_commission
            + (
                txn.commission_amount
                if txn.status == TRANSACTION_STATUS_PENDING
                else 0
            ),
            paid_commission=summary.paid_commission
            + (txn.commission_amount if txn.status == TRANSACTION_STATUS_PAID else 0),
            points_earned=summary.points_earned + txn.points_earned,
        )
    return list(summaries.values())


def compute_dashboard_stats(affiliates, transactions):
    """
    Compute program-wide numbers. Points and revenue come from the affiliate totals, commission
    owed from the pending transactions.
    """
    return DashboardStats(
        total_affiliates=len(affiliates),
        active_affiliates=sum(1 for affiliate in affiliates if affiliate.is_active),
        total_commission_owed=sum(
            (
                txn.commission_amount
                for txn in transactions
                if txn.status == TRANSACTION_STATUS_PENDING
            ),
            Decimal(0),
        ),
        total_points_issued=sum(
            (affiliate.total_points for affiliate in affiliates), Decimal(0)
        ),
        total_revenue=sum(
            (affiliate.total_revenue for affiliate in affiliates), Decimal(0)
        ),
        total_transactions=len(transactions),
    )


def get_dashboard_stats():
    """
    Get the dashboard numbers, cached until the next ledger change

    Returns:
        DashboardStats: The dashboard numbers
    """
    cached = cache.get(DASHBOARD_STATS_CACHE_KEY)
    if cached is not None:
        return DashboardStats(**cached)
    ledger = get_ledger()
    stats = compute_dashboard_stats(ledger.list_affiliates(), ledger.list_transactions())
    cache.set(
        DASHBOARD_STATS_CACHE_KEY,
        stats._asdict(),
        timeout=settings.DASHBOARD_STATS_CACHE_TIMEOUT,
    )
    return stats


def invalidate_dashboard_stats(kind, event, record_id):
    """Ledger change listener which drops the cached dashboard numbers"""
    log.debug("%s %s %s, clearing dashboard stats", kind, record_id, event)
    cache.delete(DASHBOARD_STATS_CACHE_KEY)


def commission_report_rows(summaries):
    """
    Convert commission summaries to rows for the CSV export

    Args:
        summaries (iterable of CommissionSummary): Commission summaries

    Returns:
        list of dict: Rows keyed by COMMISSION_REPORT_COLUMNS
    """
    return [
        dict(
            zip(
                COMMISSION_REPORT_COLUMNS,
                (
                    summary.name,
                    summary.email,
                    summary.code,
                    summary.total_orders,
                    format_price(summary.total_revenue),
                    format_price(summary.total_commission),
                    format_price(summary.pending_commission),
                    format_price(summary.paid_commission),
                    format_price(summary.points_earned),
                ),
            )
        )
        for summary in summaries
    ]


def commission_report_filename(now=None):
    """The download filename for the commission report, e.g. affiliate-commission-report-20240131.csv"""
    return "{}-{}.csv".format(
        COMMISSION_REPORT_FILENAME_PREFIX,
        format_datetime_for_filename(now or now_in_utc()),
    )
