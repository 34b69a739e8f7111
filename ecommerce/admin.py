"""admin classes for ecommerce"""

from django.contrib import admin

from ecommerce.models import (
    Basket,
    BasketItem,
    Line,
    Order,
    Product,
    ProductSpecification,
    PromoCode,
    PromotionClaim,
)
from storefront.admin import ReadOnlyModelAdmin, TimestampedModelAdmin


class ProductSpecificationInline(admin.TabularInline):
    """Inline form for ProductSpecification"""

    model = ProductSpecification
    extra = 1
    min_num = 1


@admin.register(Product)
class ProductAdmin(TimestampedModelAdmin):
    """Admin for Product"""

    model = Product
    list_display = ["id", "name", "content_kind", "is_active"]
    list_filter = ["content_kind", "is_active"]
    search_fields = ["name"]
    inlines = [ProductSpecificationInline]

    def get_queryset(self, request):  # noqa: ARG002
        """Overrides base method"""
        return self.model.objects.prefetch_related("specifications")


@admin.register(PromoCode)
class PromoCodeAdmin(TimestampedModelAdmin):
    """Admin for PromoCode"""

    model = PromoCode
    list_display = [
        "id",
        "code",
        "discount_type",
        "amount",
        "label",
        "is_active",
        "activation_date",
        "expiration_date",
    ]
    list_filter = ["is_active", "discount_type"]
    search_fields = ["code"]


class BasketItemInline(admin.TabularInline):
    """Inline form for BasketItem"""

    model = BasketItem
    extra = 0
    raw_id_fields = ["specification"]


@admin.register(Basket)
class BasketAdmin(TimestampedModelAdmin):
    """Admin for Basket"""

    model = Basket
    include_timestamps_in_list = True
    list_display = ["id", "user", "promo_code"]
    raw_id_fields = ["user"]
    inlines = [BasketItemInline]


class LineInline(admin.TabularInline):
    """Inline form for Line"""

    model = Line
    extra = 0
    readonly_fields = [
        "specification",
        "product_name",
        "specification_name",
        "quantity",
        "price",
    ]
    can_delete = False

    def has_add_permission(self, request, obj=None):  # noqa: ARG002
        return False


@admin.register(Order)
class OrderAdmin(TimestampedModelAdmin):
    """Admin for Order"""

    model = Order
    include_created_on_in_list = True
    list_display = [
        "id",
        "order_number",
        "purchaser",
        "status",
        "total_amount",
        "promo_code",
        "affiliate_code",
    ]
    list_filter = ["status"]
    search_fields = ["order_number", "purchaser__email", "affiliate_code"]
    raw_id_fields = ["purchaser"]
    readonly_fields = [
        "order_number",
        "subtotal",
        "discount_amount",
        "shipping_amount",
        "total_amount",
        "promo_code",
        "affiliate_code",
        "affiliate_commission",
    ]
    ordering = ["-created_on"]
    inlines = [LineInline]

    def has_add_permission(self, request):  # noqa: ARG002
        return False

    def has_delete_permission(self, request, obj=None):  # noqa: ARG002
        return False


@admin.register(PromotionClaim)
class PromotionClaimAdmin(ReadOnlyModelAdmin):
    """Admin for PromotionClaim"""

    model = PromotionClaim
    include_created_on_in_list = True
    list_display = ["id", "email", "promotion"]
    list_filter = ["promotion"]
    search_fields = ["email"]
