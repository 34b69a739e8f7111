"""ecommerce serializers"""

import logging
from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from ecommerce import models
from ecommerce.api import (
    get_basket_subtotal,
    get_discount_amount,
    set_basket_items,
    validate_promo_code,
)
from ecommerce.constants import MAX_BASKET_ITEMS

log = logging.getLogger(__name__)


class ProductSpecificationSerializer(serializers.ModelSerializer):
    """ProductSpecification serializer"""

    in_stock = serializers.SerializerMethodField()

    def get_in_stock(self, instance):
        """Untracked stock counts as in stock"""
        return instance.stock_quantity is None or instance.stock_quantity > 0

    class Meta:
        fields = ["id", "name", "price", "stock_quantity", "in_stock"]
        model = models.ProductSpecification


class ProductSerializer(serializers.ModelSerializer):
    """Product serializer"""

    specifications = ProductSpecificationSerializer(many=True, read_only=True)

    class Meta:
        fields = ["id", "name", "description", "content_kind", "specifications"]
        model = models.Product


class BasketItemSerializer(serializers.ModelSerializer):
    """BasketItem serializer"""

    specification_id = serializers.IntegerField()
    product_name = serializers.CharField(
        source="specification.product.name", read_only=True
    )
    specification_name = serializers.CharField(
        source="specification.name", read_only=True
    )
    content_kind = serializers.CharField(
        source="specification.product.content_kind", read_only=True
    )
    price = serializers.DecimalField(
        source="specification.price", max_digits=20, decimal_places=2, read_only=True
    )
    quantity = serializers.IntegerField(min_value=0)

    class Meta:
        fields = [
            "specification_id",
            "product_name",
            "specification_name",
            "content_kind",
            "price",
            "quantity",
        ]
        model = models.BasketItem


class BasketSerializer(serializers.ModelSerializer):
    """
    Basket serializer. The totals are a preview computed from current prices and the stored promo
    code; checkout computes them again.
    """

    items = BasketItemSerializer(many=True, source="basketitems")
    promo_code = serializers.CharField(read_only=True)
    summary = serializers.SerializerMethodField()

    def get_summary(self, instance):
        """Get the subtotal, discount, shipping and total for the basket"""
        subtotal = get_basket_subtotal(instance)
        discount = (
            validate_promo_code(instance.promo_code) if instance.promo_code else None
        )
        discount_amount = (
            get_discount_amount(discount, subtotal) if discount else Decimal(0)
        )
        shipping = settings.SHIPPING_COST
        return {
            "subtotal": str(subtotal),
            "discount": str(discount_amount),
            "discount_label": discount.label if discount else None,
            "promo_code_valid": discount is not None if instance.promo_code else None,
            "shipping": str(shipping),
            "total": str(subtotal - discount_amount + shipping),
        }

    def validate_items(self, items):
        """Validate the number of items"""
        if len(items) > MAX_BASKET_ITEMS:
            raise serializers.ValidationError(
                f"A basket can hold at most {MAX_BASKET_ITEMS} items."
            )
        return items

    def update(self, instance, validated_data):
        if "basketitems" in validated_data:
            set_basket_items(instance, validated_data["basketitems"])
        return instance

    class Meta:
        fields = ["id", "items", "promo_code", "summary"]
        model = models.Basket


class PromoCodeInputSerializer(serializers.Serializer):
    """Input for applying a promo code"""

    code = serializers.CharField(allow_blank=True, max_length=255)


class LineSerializer(serializers.ModelSerializer):
    """Line serializer"""

    class Meta:
        fields = ["product_name", "specification_name", "quantity", "price"]
        model = models.Line


class OrderSerializer(serializers.ModelSerializer):
    """Order summary serializer"""

    lines = LineSerializer(many=True, read_only=True)

    class Meta:
        fields = [
            "order_number",
            "status",
            "subtotal",
            "discount_amount",
            "shipping_amount",
            "total_amount",
            "promo_code",
            "lines",
            "created_on",
        ]
        model = models.Order
