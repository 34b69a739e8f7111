"""
Exceptions for ecommerce
"""


class EcommerceException(Exception):  # noqa: N818
    """
    General exception regarding ecommerce
    """
