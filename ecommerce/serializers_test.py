"""Tests for ecommerce serializers"""
from decimal import Decimal

import pytest

from ecommerce.factories import (
    LineFactory,
    OrderFactory,
    ProductSpecificationFactory,
    PromoCodeFactory,
)
from ecommerce.serializers import (
    BasketSerializer,
    OrderSerializer,
    ProductSpecificationSerializer,
)
from storefront.test_utils import drf_datetime

pytestmark = pytest.mark.django_db


@pytest.mark.parametrize(
    "stock_quantity, in_stock", [(None, True), (0, False), (3, True)]
)
def test_specification_in_stock(stock_quantity, in_stock):
    """Specifications without tracked stock are always in stock"""
    specification = ProductSpecificationFactory.create(stock_quantity=stock_quantity)
    assert ProductSpecificationSerializer(specification).data["in_stock"] is in_stock


def test_basket_summary_invalid_code(basket_230):
    """A stored code which no longer resolves should be flagged and not discounted"""
    basket = basket_230.basket
    basket.promo_code = "GONE"
    basket.save()
    summary = BasketSerializer(basket).data["summary"]
    assert summary["promo_code_valid"] is False
    assert summary["discount"] == "0"
    assert summary["discount_label"] is None


def test_basket_summary_dollars_off(basket_230, settings):
    """Dollars-off codes should reduce the total by their amount"""
    settings.SHIPPING_COST = Decimal("15.00")
    PromoCodeFactory.create(
        code="TENOFF", discount_type="dollars-off", amount=Decimal(10), label="$10 off"
    )
    basket = basket_230.basket
    basket.promo_code = "TENOFF"
    basket.save()
    summary = BasketSerializer(basket).data["summary"]
    assert summary["discount"] == "10.00"
    assert summary["discount_label"] == "$10 off"
    assert summary["total"] == "235.00"


def test_order_serializer():
    """Orders should be serialized with their lines"""
    order = OrderFactory.create(
        order_number="TEST-5",
        subtotal=Decimal("230.00"),
        discount_amount=Decimal("34.50"),
        shipping_amount=Decimal("15.00"),
        total_amount=Decimal("210.50"),
        promo_code="JANE15",
    )
    line = LineFactory.create(order=order, quantity=2, price=Decimal("100.00"))
    assert OrderSerializer(order).data == {
        "order_number": "TEST-5",
        "status": "pending",
        "subtotal": "230.00",
        "discount_amount": "34.50",
        "shipping_amount": "15.00",
        "total_amount": "210.50",
        "promo_code": "JANE15",
        "lines": [
            {
                "product_name": line.product_name,
                "specification_name": line.specification_name,
                "quantity": 2,
                "price": "100.00",
            }
        ],
        "created_on": drf_datetime(order.created_on),
    }
