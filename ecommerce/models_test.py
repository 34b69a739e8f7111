"""Tests for ecommerce models"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.db.utils import IntegrityError

from ecommerce.constants import DISCOUNT_TYPE_DOLLARS_OFF, DISCOUNT_TYPE_PERCENT_OFF
from ecommerce.factories import OrderFactory, PromoCodeFactory
from ecommerce.models import Order, PromoCode
from storefront.utils import now_in_utc

pytestmark = pytest.mark.django_db


def test_promo_code_clean_uppercases():
    """clean() should normalize the code"""
    promo_code = PromoCodeFactory.build(code=" save10 ", amount=Decimal("0.10"))
    promo_code.clean()
    assert promo_code.code == "SAVE10"


@pytest.mark.parametrize(
    "discount_type, amount",
    [(DISCOUNT_TYPE_PERCENT_OFF, Decimal("1.5")), (DISCOUNT_TYPE_DOLLARS_OFF, 0)],
)
def test_promo_code_clean_invalid_amount(discount_type, amount):
    """clean() should reject amounts which don't fit the discount type"""
    promo_code = PromoCodeFactory.build(discount_type=discount_type, amount=amount)
    with pytest.raises(ValidationError):
        promo_code.clean()


def test_promo_code_unique_ignoring_case():
    """Two codes differing only by case can't both exist"""
    PromoCodeFactory.create(code="SAVE10")
    with pytest.raises(IntegrityError):
        PromoCodeFactory.create(code="save10")


def test_currently_valid():
    """Only active codes within their dates should be returned"""
    now = now_in_utc()
    valid = PromoCodeFactory.create(expiration_date=now + timedelta(days=365))
    PromoCodeFactory.create(is_active=False)
    PromoCodeFactory.create(expiration_date=now)
    PromoCodeFactory.create(activation_date=now + timedelta(days=365))
    assert list(PromoCode.objects.currently_valid(now=now)) == [valid]


def test_make_order_number(settings):
    """Order numbers should carry the configured prefix"""
    settings.ORDER_NUMBER_PREFIX = "RDR"
    assert Order.make_order_number(42) == "RDR-42"


def test_order_str():
    """The order number and status should be in the description"""
    order = OrderFactory.create(order_number="RDR-7")
    assert str(order) == "Order RDR-7, status=pending"
