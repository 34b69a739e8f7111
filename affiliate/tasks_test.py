"""Tests for affiliate tasks"""
from decimal import Decimal

import pytest

from affiliate.factories import AffiliateFactory
from affiliate.models import AffiliateTransaction
from affiliate.tasks import record_affiliate_order
from ecommerce.factories import OrderFactory

pytestmark = pytest.mark.django_db


def test_record_affiliate_order():
    """The commission should be recorded and copied onto the order"""
    affiliate = AffiliateFactory.create(code="JANE15")
    order = OrderFactory.create(
        subtotal=Decimal("230.00"),
        affiliate_code="JANE15",
        purchaser__email="buyer@example.com",
    )
    transaction_id = record_affiliate_order.delay(order.id).get()
    txn = AffiliateTransaction.objects.get(id=transaction_id)
    assert txn.order_number == order.order_number
    assert txn.customer_email == "buyer@example.com"
    assert txn.commission_amount == Decimal("23.00")
    order.refresh_from_db()
    assert order.affiliate_commission == Decimal("23.00")
    affiliate.refresh_from_db()
    assert affiliate.total_orders == 1


def test_record_affiliate_order_twice():
    """Running the task again should not record the order twice"""
    affiliate = AffiliateFactory.create(code="JANE15")
    order = OrderFactory.create(subtotal=Decimal("100.00"), affiliate_code="JANE15")
    first = record_affiliate_order.delay(order.id).get()
    second = record_affiliate_order.delay(order.id).get()
    assert first == second
    assert AffiliateTransaction.objects.count() == 1
    affiliate.refresh_from_db()
    assert affiliate.total_commission == Decimal("10.00")


def test_record_affiliate_order_no_code(mocker):
    """Orders without an affiliate code should be skipped"""
    record_order_commission = mocker.patch("affiliate.tasks.record_order_commission")
    order = OrderFactory.create(affiliate_code="")
    assert record_affiliate_order.delay(order.id).get() is None
    record_order_commission.assert_not_called()
