"""Affiliate constants"""

AFFILIATE_CODE_MAX_LENGTH = 30

TRANSACTION_STATUS_PENDING = "pending"
TRANSACTION_STATUS_PAID = "paid"
TRANSACTION_STATUS_CANCELLED = "cancelled"
TRANSACTION_STATUSES = [
    TRANSACTION_STATUS_PENDING,
    TRANSACTION_STATUS_PAID,
    TRANSACTION_STATUS_CANCELLED,
]
# pending is the only status which can be left, and only for one of these
ALLOWED_STATUS_TRANSITIONS = {
    TRANSACTION_STATUS_PENDING: {TRANSACTION_STATUS_PAID, TRANSACTION_STATUS_CANCELLED},
}

ADJUSTMENT_ORDER_NUMBER_PREFIX = "ADJ-"

DATE_RANGE_ALL = "all"
DATE_RANGE_YEAR_TO_DATE = "ytd"
DATE_RANGE_LAST_30_DAYS = "last30"
DATE_RANGE_LAST_90_DAYS = "last90"
DATE_RANGE_CUSTOM = "custom"
DATE_RANGES = [
    DATE_RANGE_ALL,
    DATE_RANGE_YEAR_TO_DATE,
    DATE_RANGE_LAST_30_DAYS,
    DATE_RANGE_LAST_90_DAYS,
    DATE_RANGE_CUSTOM,
]

COMMISSION_REPORT_COLUMNS = [
    "Affiliate Name",
    "Email",
    "Code",
    "Total Orders",
    "Total Revenue",
    "Total Commission",
    "Pending Commission",
    "Paid Commission",
    "Points Earned",
]
COMMISSION_REPORT_FILENAME_PREFIX = "affiliate-commission-report"

DASHBOARD_STATS_CACHE_KEY = "affiliate-dashboard-stats"
