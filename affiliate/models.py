"""Model definitions for affiliates and their commission ledger"""
from django.core.validators import MaxValueValidator
from django.db import models
from django.db.models.functions import Upper

from affiliate.constants import (
    AFFILIATE_CODE_MAX_LENGTH,
    TRANSACTION_STATUS_PENDING,
    TRANSACTION_STATUSES,
)
from storefront.models import TimestampedModel


class Affiliate(TimestampedModel):
    """
    A partner whose code gives customers a discount and earns the partner commission and points.
    Totals only change when a transaction is recorded or an admin adjusts points.
    """

    code = models.CharField(max_length=AFFILIATE_CODE_MAX_LENGTH, unique=True)
    name = models.CharField(max_length=255)
    email = models.EmailField(db_index=True)
    discount_percent = models.PositiveSmallIntegerField(
        default=15, validators=[MaxValueValidator(100)]
    )
    is_active = models.BooleanField(default=True)
    total_points = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_commission = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_orders = models.PositiveIntegerField(default=0)
    total_revenue = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    notes = models.TextField(blank=True, default="")

    class Meta:
        constraints = [
            models.UniqueConstraint(Upper("code"), name="affiliate_code_ci_unique")
        ]

    def __str__(self):
        return "Affiliate: id={}, code={}, name={}".format(
            self.id, self.code, self.name
        )


class AffiliateTransaction(TimestampedModel):
    """
    A commission/points record for one order, or a manual points adjustment. The affiliate
    fields are copied so the record reads the same after the affiliate changes.
    """

    affiliate_code = models.CharField(max_length=AFFILIATE_CODE_MAX_LENGTH, db_index=True)
    affiliate_name = models.CharField(max_length=255)
    affiliate_email = models.EmailField()
    order_number = models.CharField(max_length=64, unique=True)
    order_total = models.DecimalField(max_digits=14, decimal_places=2)
    commission_amount = models.DecimalField(max_digits=12, decimal_places=2)
    points_earned = models.DecimalField(max_digits=12, decimal_places=2)
    customer_email = models.EmailField(blank=True, default="")
    reason = models.TextField(blank=True, default="")
    status = models.CharField(
        choices=[(status, status) for status in TRANSACTION_STATUSES],
        default=TRANSACTION_STATUS_PENDING,
        max_length=20,
        db_index=True,
    )

    def __str__(self):
        return "AffiliateTransaction: order_number={}, affiliate_code={}, status={}".format(
            self.order_number, self.affiliate_code, self.status
        )
