"""Admin classes for affiliate models"""

from django.contrib import admin

from affiliate.models import Affiliate, AffiliateTransaction
from storefront.admin import ReadOnlyModelAdmin, TimestampedModelAdmin


@admin.register(Affiliate)
class AffiliateAdmin(TimestampedModelAdmin):
    """Admin for Affiliate"""

    model = Affiliate
    list_display = [
        "id",
        "code",
        "name",
        "email",
        "discount_percent",
        "is_active",
        "total_orders",
        "total_commission",
    ]
    list_filter = ["is_active"]
    search_fields = ["code", "name", "email"]
    readonly_fields = [
        "total_points",
        "total_commission",
        "total_orders",
        "total_revenue",
    ]


@admin.register(AffiliateTransaction)
class AffiliateTransactionAdmin(ReadOnlyModelAdmin):
    """Admin for AffiliateTransaction, which is only written by the affiliate ledger"""

    model = AffiliateTransaction
    include_created_on_in_list = True
    list_display = [
        "id",
        "order_number",
        "affiliate_code",
        "order_total",
        "commission_amount",
        "points_earned",
        "status",
    ]
    list_filter = ["status"]
    search_fields = ["order_number", "affiliate_code", "affiliate_email"]
    ordering = ["-created_on"]
