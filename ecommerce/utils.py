"""Utility functions for ecommerce"""

import logging

from ecommerce.constants import DISCOUNT_TYPE_PERCENT_OFF, DISCOUNT_TYPES

log = logging.getLogger(__name__)


def validate_amount(discount_type, amount):
    """
    Validate the amount/discount value

        Case 1: If discount type is percent-off the amount can be between 0-1
        Case 2: If discount type is dollars-off the amount can be any value above 0

    Returns:
        Optional[str]: An error message, or None if the amount is valid
    """
    if discount_type not in DISCOUNT_TYPES:
        return f"Unknown discount type {discount_type}."

    if amount is None or amount <= 0:
        return "The amount is invalid, please specify a value greater than 0."

    if discount_type == DISCOUNT_TYPE_PERCENT_OFF and amount > 1:
        return "The amount should be between (0 - 1) when discount type is percent-off."

    return None
