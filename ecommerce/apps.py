"""ecommerce app settings"""

from django.apps import AppConfig


class EcommerceConfig(AppConfig):
    """AppConfig for Ecommerce"""

    name = "ecommerce"
