"""Views for ecommerce"""

import logging

from django_filters import rest_framework as filters
from rest_framework import status
from rest_framework.authentication import SessionAuthentication
from rest_framework.generics import (
    RetrieveAPIView,
    RetrieveUpdateAPIView,
    get_object_or_404,
)
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import ReadOnlyModelViewSet

from ecommerce.api import (
    apply_promo_code,
    checkout,
    claim_promotion,
    get_or_create_basket,
    has_claimed_promotion,
    remove_promo_code,
)
from ecommerce.filters import ProductFilter
from ecommerce.models import Order, Product
from ecommerce.serializers import (
    BasketSerializer,
    OrderSerializer,
    ProductSerializer,
    PromoCodeInputSerializer,
)

log = logging.getLogger(__name__)


class ProductViewSet(ReadOnlyModelViewSet):
    """API view set for Products"""

    authentication_classes = ()
    permission_classes = ()
    serializer_class = ProductSerializer
    filter_backends = (filters.DjangoFilterBackend,)
    filterset_class = ProductFilter

    def get_queryset(self):
        return Product.objects.active().prefetch_related("specifications").order_by("name")


class BasketView(RetrieveUpdateAPIView):
    """API view for viewing and updating a basket"""

    permission_classes = (IsAuthenticated,)
    authentication_classes = (SessionAuthentication,)
    serializer_class = BasketSerializer

    def get_object(self):
        """Get basket for user"""
        return get_or_create_basket(self.request.user)


class BasketPromoCodeView(APIView):
    """API view for applying a promo code to the basket or removing it"""

    permission_classes = (IsAuthenticated,)
    authentication_classes = (SessionAuthentication,)

    def post(self, request, *args, **kwargs):  # noqa: ARG002
        """Apply a promo code, replacing any code already applied"""
        serializer = PromoCodeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        basket = get_or_create_basket(request.user)
        apply_promo_code(basket, serializer.validated_data["code"])
        return Response(BasketSerializer(basket).data)

    def delete(self, request, *args, **kwargs):  # noqa: ARG002
        """Remove the promo code"""
        basket = get_or_create_basket(request.user)
        remove_promo_code(basket)
        return Response(BasketSerializer(basket).data)


class CheckoutView(APIView):
    """
    View for checkout API. This validates the basket, creates an order from it and completes
    the order.
    """

    authentication_classes = (SessionAuthentication,)
    permission_classes = (IsAuthenticated,)

    def post(self, request, *args, **kwargs):  # noqa: ARG002
        """
        Create and complete an order from the user's basket
        """
        order = checkout(request.user)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderView(RetrieveAPIView):
    """
    View for an order summary. Only the purchaser can see an order.
    """

    authentication_classes = (SessionAuthentication,)
    permission_classes = (IsAuthenticated,)
    serializer_class = OrderSerializer
    lookup_field = "order_number"

    def get_queryset(self):
        return Order.objects.filter(purchaser=self.request.user).prefetch_related("lines")


class PromotionClaimView(APIView):
    """
    View for one-time promotions, keyed by the email of the logged in user
    """

    authentication_classes = (SessionAuthentication,)
    permission_classes = (IsAuthenticated,)

    def get(self, request, promotion, *args, **kwargs):  # noqa: ARG002
        """Whether the user already claimed the promotion"""
        return Response(
            {
                "promotion": promotion,
                "claimed": has_claimed_promotion(request.user.email, promotion),
            }
        )

    def post(self, request, promotion, *args, **kwargs):  # noqa: ARG002
        """Claim the promotion"""
        created = claim_promotion(request.user.email, promotion)
        return Response(
            {"promotion": promotion, "claimed": True},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
