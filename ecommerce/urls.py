"""URLs for ecommerce"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from ecommerce.views import (
    BasketPromoCodeView,
    BasketView,
    CheckoutView,
    OrderView,
    ProductViewSet,
    PromotionClaimView,
)

router = SimpleRouter()
router.register(r"products", ProductViewSet, basename="products_api")

urlpatterns = [
    path("api/", include(router.urls)),
    path("api/basket/", BasketView.as_view(), name="basket_api"),
    path(
        "api/basket/promo_code/",
        BasketPromoCodeView.as_view(),
        name="basket_promo_code_api",
    ),
    path("api/checkout/", CheckoutView.as_view(), name="checkout"),
    path(
        "api/orders/<str:order_number>/",
        OrderView.as_view(),
        name="order_api",
    ),
    path(
        "api/promotions/<slug:promotion>/claim/",
        PromotionClaimView.as_view(),
        name="promotion_claim_api",
    ),
]
