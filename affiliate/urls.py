"""URLs for the affiliate program"""
from django.urls import include, path
from rest_framework.routers import SimpleRouter

from affiliate.views import (
    AffiliateAccountView,
    AffiliateStatsView,
    AffiliateTransactionViewSet,
    AffiliateViewSet,
    commission_report_csv_view,
)

router = SimpleRouter()
router.register(r"affiliates", AffiliateViewSet, basename="affiliates_api")
router.register(
    r"affiliate_transactions",
    AffiliateTransactionViewSet,
    basename="affiliate_transactions_api",
)

urlpatterns = [
    path("api/", include(router.urls)),
    path("api/affiliate_stats/", AffiliateStatsView.as_view(), name="affiliate_stats_api"),
    path(
        "api/affiliate_account/",
        AffiliateAccountView.as_view(),
        name="affiliate_account_api",
    ),
    path(
        "affiliates/commission_report.csv",
        commission_report_csv_view,
        name="affiliate_commission_report_csv",
    ),
]
