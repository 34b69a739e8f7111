"""fixtures for ecommerce tests"""
from decimal import Decimal
from types import SimpleNamespace

import pytest

# pylint:disable=redefined-outer-name
from affiliate.factories import AffiliateFactory
from ecommerce.factories import (
    BasketFactory,
    BasketItemFactory,
    ProductSpecificationFactory,
)


@pytest.fixture()
def basket(user):
    """An empty basket for the user"""
    return BasketFactory.create(user=user)


@pytest.fixture()
def basket_230(basket):
    """
    A basket worth $230: two of a $100 specification with tracked stock and one $30 specification
    without stock tracking
    """
    tracked = ProductSpecificationFactory.create(
        price=Decimal("100.00"), stock_quantity=5
    )
    untracked = ProductSpecificationFactory.create(price=Decimal("30.00"))
    BasketItemFactory.create(basket=basket, specification=tracked, quantity=2)
    BasketItemFactory.create(basket=basket, specification=untracked, quantity=1)
    return SimpleNamespace(basket=basket, tracked=tracked, untracked=untracked)


@pytest.fixture()
def jane_affiliate():
    """An active affiliate with a 15% code"""
    return AffiliateFactory.create(
        code="JANE15", name="Jane Doe", email="jane@example.com", discount_percent=15
    )
