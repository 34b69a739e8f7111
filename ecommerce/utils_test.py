"""Tests for utility functions for ecommerce"""
from decimal import Decimal

import pytest

from ecommerce.constants import DISCOUNT_TYPE_DOLLARS_OFF, DISCOUNT_TYPE_PERCENT_OFF
from ecommerce.utils import validate_amount


@pytest.mark.parametrize(
    "discount_type, amount, error",
    [
        (DISCOUNT_TYPE_PERCENT_OFF, Decimal("0.15"), None),
        (DISCOUNT_TYPE_PERCENT_OFF, Decimal(1), None),
        (
            DISCOUNT_TYPE_PERCENT_OFF,
            Decimal("1.01"),
            "The amount should be between (0 - 1) when discount type is percent-off.",
        ),
        (DISCOUNT_TYPE_DOLLARS_OFF, Decimal(250), None),
        (
            DISCOUNT_TYPE_DOLLARS_OFF,
            Decimal(0),
            "The amount is invalid, please specify a value greater than 0.",
        ),
        (
            DISCOUNT_TYPE_PERCENT_OFF,
            None,
            "The amount is invalid, please specify a value greater than 0.",
        ),
        ("free-stuff", Decimal(1), "Unknown discount type free-stuff."),
    ],
)
def test_validate_amount(discount_type, amount, error):
    """validate_amount should return an error message for invalid amounts"""
    assert validate_amount(discount_type, amount) == error
