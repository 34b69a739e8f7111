"""Models for ecommerce"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models.functions import Upper

from ecommerce.constants import (
    CONTENT_KIND_STANDARD,
    CONTENT_KINDS,
    DISCOUNT_TYPES,
    ORDER_STATUS_PENDING,
    ORDER_STATUSES,
    PROMO_CODE_MAX_LENGTH,
    PROMOTION_NAME_MAX_LENGTH,
)
from ecommerce.utils import validate_amount
from storefront.models import TimestampedModel, TimestampedModelQuerySet
from storefront.utils import now_in_utc

log = logging.getLogger()


class ProductQuerySet(TimestampedModelQuerySet):
    """QuerySet for Product"""

    def active(self):
        """Filters for products which can be purchased"""
        return self.filter(is_active=True)


class Product(TimestampedModel):
    """
    A product in the catalog. What is actually purchased is one of its specifications.
    """

    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")
    content_kind = models.CharField(
        choices=[(kind, kind) for kind in CONTENT_KINDS],
        default=CONTENT_KIND_STANDARD,
        max_length=30,
        db_index=True,
    )
    is_active = models.BooleanField(default=True)

    objects = ProductQuerySet.as_manager()

    def __str__(self):
        """Description for Product"""
        return f"Product {self.name} ({self.content_kind})"


class ProductSpecification(TimestampedModel):
    """
    A purchasable variant of a product (e.g. a size) with its own price and stock
    """

    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="specifications"
    )
    name = models.CharField(max_length=100)
    price = models.DecimalField(decimal_places=2, max_digits=20)
    # None means stock isn't tracked for this specification
    stock_quantity = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        unique_together = ("product", "name")

    def __str__(self):
        """Description for ProductSpecification"""
        return f"{self.product.name} - {self.name} for {self.price}"


class Basket(TimestampedModel):
    """
    Represents a User's basket. A Basket is made up of BasketItems and holds at most one promo code.
    It is created on the first cart interaction and deleted on checkout or after it expires.
    """

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.PROTECT)
    promo_code = models.CharField(max_length=PROMO_CODE_MAX_LENGTH, blank=True, default="")

    def __str__(self):
        """Description of Basket"""
        return f"Basket for {self.user}"


class BasketItem(TimestampedModel):
    """
    Represents one or more of a product specification in a user's basket.
    """

    basket = models.ForeignKey(
        Basket, on_delete=models.CASCADE, related_name="basketitems"
    )
    specification = models.ForeignKey(ProductSpecification, on_delete=models.PROTECT)
    quantity = models.PositiveIntegerField()

    class Meta:
        unique_together = ("basket", "specification")

    def __str__(self):
        """Description of BasketItem"""
        return f"BasketItem of {self.specification} (qty: {self.quantity})"


class PromoCodeQuerySet(TimestampedModelQuerySet):
    """QuerySet for PromoCode"""

    def currently_valid(self, now=None):
        """Filters for active codes within their activation and expiration dates"""
        now = now or now_in_utc()
        return self.filter(
            models.Q(activation_date__isnull=True) | models.Q(activation_date__lte=now),
            models.Q(expiration_date__isnull=True) | models.Q(expiration_date__gt=now),
            is_active=True,
        )


class PromoCode(TimestampedModel):
    """
    A storefront-wide discount code. Affiliate codes are not stored here, they come from the
    affiliate ledger.
    """

    code = models.CharField(max_length=PROMO_CODE_MAX_LENGTH, unique=True)
    discount_type = models.CharField(
        choices=[(_type, _type) for _type in DISCOUNT_TYPES], max_length=30
    )
    # A fraction between 0 and 1 for percent-off codes, a currency amount for dollars-off codes
    amount = models.DecimalField(decimal_places=5, max_digits=20)
    label = models.CharField(max_length=100, blank=True, default="")
    is_active = models.BooleanField(default=True)
    activation_date = models.DateTimeField(null=True, blank=True)
    expiration_date = models.DateTimeField(null=True, blank=True)

    objects = PromoCodeQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(Upper("code"), name="promo_code_ci_unique")
        ]

    def __str__(self):
        """Description for PromoCode"""
        return f"PromoCode {self.code}: {self.discount_type} {self.amount}"

    def clean(self):
        """Validate the amount against the discount type"""
        super().clean()
        error = validate_amount(self.discount_type, self.amount)
        if error:
            raise ValidationError({"amount": error})
        self.code = (self.code or "").strip().upper()


class Order(TimestampedModel):
    """
    An order containing information for a purchase. Prices and discounts are fixed when the order
    is created.
    """

    purchaser = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="orders"
    )
    order_number = models.CharField(max_length=64, unique=True, null=True, blank=True)  # noqa: DJ001
    status = models.CharField(
        choices=[(status, status) for status in ORDER_STATUSES],
        default=ORDER_STATUS_PENDING,
        max_length=30,
        db_index=True,
    )
    subtotal = models.DecimalField(decimal_places=2, max_digits=20)
    discount_amount = models.DecimalField(decimal_places=2, max_digits=20, default=0)
    shipping_amount = models.DecimalField(decimal_places=2, max_digits=20, default=0)
    total_amount = models.DecimalField(decimal_places=2, max_digits=20)
    promo_code = models.CharField(max_length=PROMO_CODE_MAX_LENGTH, blank=True, default="")
    affiliate_code = models.CharField(
        max_length=PROMO_CODE_MAX_LENGTH, blank=True, default="", db_index=True
    )
    affiliate_commission = models.DecimalField(
        decimal_places=2, max_digits=20, null=True, blank=True
    )

    @staticmethod
    def make_order_number(order_id):
        """The order number shown to customers and used as the affiliate transaction key"""
        return f"{settings.ORDER_NUMBER_PREFIX}-{order_id}"

    def __str__(self):
        """Description for Order"""
        return f"Order {self.order_number}, status={self.status}"


class Line(TimestampedModel):
    """
    A line in an order. The product and specification names are copied so the order reads the
    same after the catalog changes.
    """

    order = models.ForeignKey(Order, on_delete=models.PROTECT, related_name="lines")
    specification = models.ForeignKey(ProductSpecification, on_delete=models.PROTECT)
    product_name = models.CharField(max_length=255)
    specification_name = models.CharField(max_length=100)
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(decimal_places=2, max_digits=20)

    def __str__(self):
        """Description for Line"""
        return f"Line for order {self.order.order_number}, {self.product_name} - {self.specification_name} (qty: {self.quantity})"


class PromotionClaim(TimestampedModel):
    """
    Records that a person has already submitted a one-time promotion
    """

    email = models.EmailField()
    promotion = models.CharField(max_length=PROMOTION_NAME_MAX_LENGTH)

    class Meta:
        unique_together = ("email", "promotion")

    def __str__(self):
        """Description for PromotionClaim"""
        return f"PromotionClaim of {self.promotion} by {self.email}"
