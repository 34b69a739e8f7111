"""Ecommerce filters"""
from django_filters import rest_framework as filters

from ecommerce.constants import CONTENT_KINDS
from ecommerce.models import Product


class ProductFilter(filters.FilterSet):
    """Filters for Product model"""

    content_kind = filters.ChoiceFilter(
        field_name="content_kind", choices=[(kind, kind) for kind in CONTENT_KINDS]
    )

    class Meta:
        model = Product
        fields = []
