"""Affiliate program logic"""
import logging
import random
import re
import uuid
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import NamedTuple

from django.conf import settings
from rest_framework.exceptions import NotFound, ValidationError

from affiliate.constants import (
    ADJUSTMENT_ORDER_NUMBER_PREFIX,
    AFFILIATE_CODE_MAX_LENGTH,
    ALLOWED_STATUS_TRANSITIONS,
    TRANSACTION_STATUS_PAID,
    TRANSACTION_STATUS_PENDING,
    TRANSACTION_STATUSES,
)
from affiliate.ledger import AffiliateRecord, TransactionRecord, get_ledger, reset_ledger
from ecommerce.models import Order
from storefront.utils import case_insensitive_equal, first_or_none, round_half_up

log = logging.getLogger(__name__)

AFFILIATE_EDITABLE_FIELDS = {
    "code",
    "name",
    "email",
    "discount_percent",
    "is_active",
    "notes",
}
MAX_GENERATED_CODE_ATTEMPTS = 100


class PointsAdjustment(NamedTuple):
    """The result of a manual points adjustment"""

    affiliate: AffiliateRecord
    transaction: TransactionRecord


def normalize_affiliate_code(code):
    """
    Uppercase a code and strip everything that isn't a letter or a digit

    Args:
        code (str): An affiliate code as typed by a person

    Returns:
        str: The normalized code
    """
    return re.sub(r"[^A-Z0-9]", "", (code or "").upper())


def _find_affiliate_by_code(code, *, ledger, exclude_id=None):
    """Look up an affiliate by code, ignoring case"""
    return first_or_none(
        affiliate
        for affiliate in ledger.list_affiliates()
        if affiliate.code
        and case_insensitive_equal(affiliate.code, code)
        and affiliate.id != exclude_id
    )


def _get_affiliate_or_404(affiliate_id, *, ledger):
    """Fetch an affiliate or raise NotFound"""
    affiliate = ledger.get_affiliate(affiliate_id)
    if affiliate is None:
        raise NotFound(f"Affiliate {affiliate_id} does not exist")
    return affiliate


def _clean_affiliate_fields(fields, *, ledger, affiliate_id=None):
    """
    Validate and normalize affiliate fields before they are written

    Args:
        fields (dict): Affiliate fields, all of them for a new affiliate or some of them for an update
        ledger (Ledger): The ledger to check for duplicate codes
        affiliate_id (str): The id of the affiliate being updated, if any

    Returns:
        dict: The cleaned fields
    """
    unknown_fields = set(fields) - AFFILIATE_EDITABLE_FIELDS
    if unknown_fields:
        raise ValidationError(
            {
                field: "This field cannot be changed directly."
                for field in sorted(unknown_fields)
            }
        )

    cleaned = dict(fields)
    for field, message in (
        ("name", "Please enter the affiliate name."),
        ("email", "Please enter the affiliate email."),
        ("code", "Please enter or generate an affiliate code."),
    ):
        if field in cleaned:
            cleaned[field] = (cleaned[field] or "").strip()
            if not cleaned[field]:
                raise ValidationError({field: message})

    if "code" in cleaned:
        code = normalize_affiliate_code(cleaned["code"])
        if not code:
            raise ValidationError({"code": "Codes may only contain letters and digits."})
        if len(code) > AFFILIATE_CODE_MAX_LENGTH:
            raise ValidationError(
                {
                    "code": f"Codes may be at most {AFFILIATE_CODE_MAX_LENGTH} characters long."
                }
            )
        existing = _find_affiliate_by_code(code, ledger=ledger, exclude_id=affiliate_id)
        if existing is not None:
            raise ValidationError(
                {
                    "code": f'The code "{code}" is already in use by {existing.name}. Please choose a different code.'
                }
            )
        cleaned["code"] = code

    if "discount_percent" in cleaned:
        try:
            discount_percent = int(cleaned["discount_percent"])
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                {"discount_percent": "Discount percent must be a whole number."}
            ) from exc
        if not 0 <= discount_percent <= 100:  # noqa: PLR2004
            raise ValidationError(
                {"discount_percent": "Discount percent must be between 0 and 100."}
            )
        cleaned["discount_percent"] = discount_percent

    if "is_active" in cleaned:
        cleaned["is_active"] = bool(cleaned["is_active"])
    if "notes" in cleaned:
        cleaned["notes"] = cleaned["notes"] or ""
    return cleaned


def create_affiliate(*, ledger=None, **fields):
    """
    Create an affiliate with zeroed totals

    Args:
        ledger (Ledger): The ledger to write to, by default the selected ledger
        **fields: name, email and code are required. discount_percent, is_active and notes are optional

    Returns:
        AffiliateRecord: The new affiliate
    """
    ledger = ledger or get_ledger()
    for field in ("name", "email", "code"):
        fields.setdefault(field, "")
    cleaned = _clean_affiliate_fields(fields, ledger=ledger)
    cleaned.setdefault("discount_percent", settings.AFFILIATE_DEFAULT_DISCOUNT_PERCENT)
    cleaned.setdefault("is_active", True)
    cleaned.setdefault("notes", "")
    affiliate = ledger.create_affiliate(
        {
            **cleaned,
            "total_points": Decimal(0),
            "total_commission": Decimal(0),
            "total_orders": 0,
            "total_revenue": Decimal(0),
        }
    )
    log.info("Created affiliate %s with code %s", affiliate.id, affiliate.code)
    return affiliate


def update_affiliate(affiliate_id, *, ledger=None, **fields):
    """
    Update the editable fields of an affiliate. Totals can't be changed this way.

    Args:
        affiliate_id (str): The affiliate id
        ledger (Ledger): The ledger to write to, by default the selected ledger
        **fields: The fields to change

    Returns:
        AffiliateRecord: The updated affiliate
    """
    ledger = ledger or get_ledger()
    _get_affiliate_or_404(affiliate_id, ledger=ledger)
    cleaned = _clean_affiliate_fields(fields, ledger=ledger, affiliate_id=affiliate_id)
    if not cleaned:
        return ledger.get_affiliate(affiliate_id)
    affiliate = ledger.update_affiliate(affiliate_id, cleaned)
    log.info("Updated affiliate %s: %s", affiliate_id, sorted(cleaned))
    return affiliate


def set_affiliate_active(affiliate_id, is_active, *, ledger=None):
    """Activate or deactivate an affiliate's code"""
    return update_affiliate(affiliate_id, ledger=ledger, is_active=is_active)


def delete_affiliate(affiliate_id, *, ledger=None):
    """
    Delete an affiliate. Its transactions are kept since they carry their own copy of the affiliate
    details.
    """
    ledger = ledger or get_ledger()
    affiliate = _get_affiliate_or_404(affiliate_id, ledger=ledger)
    ledger.delete_affiliate(affiliate_id)
    log.info("Deleted affiliate %s with code %s", affiliate_id, affiliate.code)


def generate_affiliate_code(name, *, ledger=None):
    """
    Suggest an unused code made of the first name and a number from 1 to 99

    Args:
        name (str): The affiliate's name
        ledger (Ledger): The ledger to check for existing codes

    Returns:
        str: An unused affiliate code
    """
    ledger = ledger or get_ledger()
    first_name = normalize_affiliate_code((name or "").strip().split(" ")[0]) or "AFF"
    first_name = first_name[: AFFILIATE_CODE_MAX_LENGTH - 2]
    existing_codes = {affiliate.code.upper() for affiliate in ledger.list_affiliates()}
    for _ in range(MAX_GENERATED_CODE_ATTEMPTS):
        code = f"{first_name}{random.randint(1, 99)}"  # noqa: S311
        if code not in existing_codes:
            return code
    raise ValidationError(
        {"code": f"Unable to generate an unused code for {first_name}, enter one instead."}
    )


def get_active_affiliate_by_code(code, *, ledger=None):
    """
    Look up an active affiliate by code, ignoring case. The ledger is read on every call so a
    deactivated code stops working right away.

    Args:
        code (str): An affiliate code
        ledger (Ledger): The ledger to read

    Returns:
        Optional[AffiliateRecord]: The affiliate, or None
    """
    ledger = ledger or get_ledger()
    affiliate = _find_affiliate_by_code(code, ledger=ledger)
    return affiliate if affiliate is not None and affiliate.is_active else None


def get_affiliate_by_email(email, *, ledger=None):
    """
    Find the affiliate record belonging to an email address

    Args:
        email (str): The email address of a user
        ledger (Ledger): The ledger to read

    Returns:
        Optional[AffiliateRecord]: The affiliate, or None
    """
    if not email:
        return None
    ledger = ledger or get_ledger()
    return first_or_none(
        affiliate
        for affiliate in ledger.list_affiliates()
        if affiliate.email and case_insensitive_equal(affiliate.email, email)
    )


def get_transactions_for_affiliate(code, *, ledger=None):
    """All transactions recorded for an affiliate code, newest first"""
    ledger = ledger or get_ledger()
    return ledger.list_transactions(affiliate_code=code)


def calculate_commission(order_total):
    """
    Calculate the commission earned on an order

    Args:
        order_total (decimal.Decimal): The amount the commission is based on

    Returns:
        decimal.Decimal: The commission, rounded to cents
    """
    return round_half_up(Decimal(order_total) * settings.AFFILIATE_COMMISSION_RATE)


def calculate_points(order_total):
    """
    Calculate the points earned on an order

    Args:
        order_total (decimal.Decimal): The amount the points are based on

    Returns:
        decimal.Decimal: The points, rounded to hundredths
    """
    return round_half_up(Decimal(order_total) * settings.AFFILIATE_POINTS_RATE)


def _complete_interrupted_accrual(affiliate_transaction, *, ledger):
    """Add the amounts of a transaction whose totals update failed earlier"""
    affiliate = _find_affiliate_by_code(affiliate_transaction.affiliate_code, ledger=ledger)
    if affiliate is None:
        log.error(
            "Transaction %s for order %s was never added to the totals of affiliate %s, "
            "which no longer exists",
            affiliate_transaction.id,
            affiliate_transaction.order_number,
            affiliate_transaction.affiliate_code,
        )
        return affiliate_transaction
    log.warning(
        "Adding transaction %s for order %s to the totals of affiliate %s",
        affiliate_transaction.id,
        affiliate_transaction.order_number,
        affiliate.code,
    )
    return ledger.complete_accrual(affiliate.id, affiliate_transaction)


def record_order_commission(
    *, affiliate_code, order_number, order_total, customer_email, ledger=None
):
    """
    Record the commission and points an affiliate earned on an order and add them to the
    affiliate's totals. Recording the same order twice returns the first transaction unchanged.

    Args:
        affiliate_code (str): The code used on the order
        order_number (str): The order number
        order_total (decimal.Decimal): The amount commission and points are based on
        customer_email (str): The email of the purchaser
        ledger (Ledger): The ledger to write to

    Returns:
        Optional[TransactionRecord]: The transaction, or None if the code doesn't belong to an affiliate
    """
    ledger = ledger or get_ledger()
    existing = ledger.get_recorded_accrual(order_number)
    if existing is not None:
        if existing.totals_applied:
            log.info(
                "Commission for order %s was already recorded as transaction %s",
                order_number,
                existing.id,
            )
            return existing
        return _complete_interrupted_accrual(existing, ledger=ledger)

    affiliate = _find_affiliate_by_code(affiliate_code, ledger=ledger)
    if affiliate is None:
        log.warning(
            "Order %s used code %s which does not belong to an affiliate",
            order_number,
            affiliate_code,
        )
        return None

    order_total = round_half_up(order_total)
    commission = calculate_commission(order_total)
    points = calculate_points(order_total)
    affiliate_transaction = ledger.record_accrual(
        affiliate.id,
        {
            "affiliate_code": affiliate.code,
            "affiliate_name": affiliate.name,
            "affiliate_email": affiliate.email,
            "order_number": order_number,
            "order_total": order_total,
            "commission_amount": commission,
            "points_earned": points,
            "customer_email": customer_email or "",
            "reason": "",
            "status": TRANSACTION_STATUS_PENDING,
        },
    )
    log.info(
        "Recorded commission %s and %s points for affiliate %s on order %s",
        commission,
        points,
        affiliate.code,
        order_number,
    )
    return affiliate_transaction


def make_adjustment_order_number():
    """Make a unique order number for a manual points adjustment"""
    return f"{ADJUSTMENT_ORDER_NUMBER_PREFIX}{uuid.uuid4().hex[:12].upper()}"


def adjust_affiliate_points(affiliate_id, amount, reason, *, admin_email="", ledger=None):
    """
    Add (or with a negative amount, remove) points from an affiliate. The balance never drops
    below zero. The adjustment is recorded as a paid transaction.

    Args:
        affiliate_id (str): The affiliate id
        amount (decimal.Decimal): The number of points to add
        reason (str): Why the points were adjusted
        admin_email (str): The email of the person making the adjustment
        ledger (Ledger): The ledger to write to

    Returns:
        PointsAdjustment: The updated affiliate and the adjustment transaction
    """
    try:
        amount = round_half_up(Decimal(str(amount)))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError({"amount": "Amount must be a number."}) from exc
    if amount == 0:
        raise ValidationError({"amount": "Amount must not be zero."})

    ledger = ledger or get_ledger()
    affiliate = _get_affiliate_or_404(affiliate_id, ledger=ledger)
    new_balance = max(Decimal(0), affiliate.total_points + amount)
    affiliate = ledger.update_affiliate(affiliate_id, {"total_points": new_balance})
    adjustment = ledger.create_transaction(
        {
            "affiliate_code": affiliate.code,
            "affiliate_name": affiliate.name,
            "affiliate_email": affiliate.email,
            "order_number": make_adjustment_order_number(),
            "order_total": Decimal(0),
            "commission_amount": Decimal(0),
            "points_earned": amount,
            "customer_email": admin_email or "",
            "reason": reason or "",
            "status": TRANSACTION_STATUS_PAID,
        }
    )
    log.info(
        "Adjusted points of affiliate %s by %s to %s: %s",
        affiliate.code,
        amount,
        new_balance,
        reason,
    )
    return PointsAdjustment(affiliate=affiliate, transaction=adjustment)


def update_transaction_status(transaction_id, status, *, ledger=None):
    """
    Move a pending transaction to paid or cancelled

    Args:
        transaction_id (str): The transaction id
        status (str): The new status
        ledger (Ledger): The ledger to write to

    Returns:
        TransactionRecord: The updated transaction
    """
    if status not in TRANSACTION_STATUSES:
        raise ValidationError({"status": f"Unknown status {status}"})
    ledger = ledger or get_ledger()
    affiliate_transaction = ledger.get_transaction(transaction_id)
    if affiliate_transaction is None:
        raise NotFound(f"Transaction {transaction_id} does not exist")
    if status not in ALLOWED_STATUS_TRANSITIONS.get(
        affiliate_transaction.status, set()
    ):
        raise ValidationError(
            {
                "status": f"A {affiliate_transaction.status} transaction cannot be changed to {status}"
            }
        )
    updated = ledger.update_transaction(transaction_id, {"status": status})
    log.info(
        "Transaction %s for order %s changed from %s to %s",
        transaction_id,
        affiliate_transaction.order_number,
        affiliate_transaction.status,
        status,
    )
    return updated


def recheck_ledger():
    """
    Probe the storage backends again, for example after the entity store came back

    Returns:
        str: The name of the selected ledger
    """
    reset_ledger()
    return get_ledger().name


class BackfillResult(NamedTuple):
    """Counts from tagging old orders with the affiliate whose discount they got"""

    patched: int
    total: int


def backfill_affiliate_orders(*, dry_run=False, ledger=None):
    """
    Tag discounted orders which have no affiliate code with the first affiliate whose discount
    percent matches the discount the order received. Commission transactions are not created.

    Args:
        dry_run (bool): If True, only count the orders which would be tagged
        ledger (Ledger): The ledger to read affiliates from

    Returns:
        BackfillResult: How many orders were (or would be) tagged, and how many orders were checked
    """
    ledger = ledger or get_ledger()
    affiliates = ledger.list_affiliates()
    orders = Order.objects.order_by("-created_on")
    patched = 0
    total = 0
    for order in orders:
        total += 1
        if order.affiliate_code or order.discount_amount <= 0 or order.subtotal <= 0:
            continue
        discount_percent = int(
            (order.discount_amount / order.subtotal * 100).quantize(
                Decimal(1), rounding=ROUND_HALF_UP
            )
        )
        affiliate = first_or_none(
            affiliate
            for affiliate in affiliates
            if affiliate.discount_percent == discount_percent
        )
        if affiliate is None:
            continue
        patched += 1
        log.info(
            "%s order %s with affiliate %s",
            "Would tag" if dry_run else "Tagging",
            order.order_number,
            affiliate.code,
        )
        if not dry_run:
            order.affiliate_code = affiliate.code
            order.affiliate_commission = calculate_commission(order.subtotal)
            order.save(update_fields=["affiliate_code", "affiliate_commission", "updated_on"])
    return BackfillResult(patched=patched, total=total)
