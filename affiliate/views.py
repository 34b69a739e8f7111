"""Views for the affiliate program"""
import logging

from django.core.exceptions import PermissionDenied
from django.http import HttpResponseBadRequest
from rest_framework import status, viewsets
from rest_framework.authentication import SessionAuthentication
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from affiliate import api
from affiliate.constants import COMMISSION_REPORT_COLUMNS
from affiliate.ledger import get_ledger
from affiliate.reports import (
    commission_report_filename,
    commission_report_rows,
    filter_transactions,
    filter_transactions_by_date_range,
    get_dashboard_stats,
    summarize_commissions,
)
from affiliate.serializers import (
    AffiliateAccountSerializer,
    AffiliateSerializer,
    AffiliateTransactionSerializer,
    CommissionSummarySerializer,
    DashboardStatsSerializer,
    GenerateCodeSerializer,
    PointsAdjustmentSerializer,
    TransactionFilterSerializer,
)
from storefront.utils import make_csv_http_response

log = logging.getLogger(__name__)


def _filtered_transactions(query_params):
    """Fetch all transactions and apply the date range, status and search query parameters"""
    filter_serializer = TransactionFilterSerializer(data=query_params)
    filter_serializer.is_valid(raise_exception=True)
    filters = filter_serializer.validated_data
    transactions = filter_transactions_by_date_range(
        get_ledger().list_transactions(),
        filters["date_range"],
        start=filters["start"],
        end=filters["end"],
    )
    return filter_transactions(
        transactions, status=filters["status"], search=filters["search"]
    )


class AffiliateViewSet(viewsets.ViewSet):
    """Staff API for managing affiliates"""

    authentication_classes = (SessionAuthentication,)
    permission_classes = (IsAdminUser,)

    def _get_affiliate(self, pk):
        affiliate = get_ledger().get_affiliate(pk)
        if affiliate is None:
            raise NotFound(f"Affiliate {pk} does not exist")
        return affiliate

    def list(self, request):  # noqa: ARG002
        """List all affiliates"""
        return Response(
            AffiliateSerializer(get_ledger().list_affiliates(), many=True).data
        )

    def retrieve(self, request, pk=None):  # noqa: ARG002
        """Fetch one affiliate"""
        return Response(AffiliateSerializer(self._get_affiliate(pk)).data)

    def create(self, request):
        """Create an affiliate"""
        serializer = AffiliateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial=False):
        """Update an affiliate"""
        serializer = AffiliateSerializer(
            self._get_affiliate(pk), data=request.data, partial=partial
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def partial_update(self, request, pk=None):
        """Update some fields of an affiliate"""
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):  # noqa: ARG002
        """Delete an affiliate"""
        api.delete_affiliate(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def adjust_points(self, request, pk=None):
        """Add or remove points from an affiliate"""
        serializer = PointsAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        adjustment = api.adjust_affiliate_points(
            pk,
            serializer.validated_data["amount"],
            serializer.validated_data["reason"],
            admin_email=request.user.email,
        )
        return Response(
            {
                "affiliate": AffiliateSerializer(adjustment.affiliate).data,
                "transaction": AffiliateTransactionSerializer(
                    adjustment.transaction
                ).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["post"])
    def generate_code(self, request):
        """Suggest an unused code for an affiliate name"""
        serializer = GenerateCodeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(
            {"code": api.generate_affiliate_code(serializer.validated_data["name"])}
        )

    @action(detail=False, methods=["post"])
    def recheck_storage(self, request):  # noqa: ARG002
        """Probe the entity store again and report which ledger is in use"""
        ledger_name = api.recheck_ledger()
        log.info("Affiliate ledger rechecked by %s: %s", request.user, ledger_name)
        return Response({"ledger": ledger_name})


class AffiliateTransactionViewSet(viewsets.ViewSet):
    """Staff API for listing transactions and marking them paid or cancelled"""

    authentication_classes = (SessionAuthentication,)
    permission_classes = (IsAdminUser,)

    def list(self, request):
        """List transactions, newest first"""
        return Response(
            AffiliateTransactionSerializer(
                _filtered_transactions(request.query_params), many=True
            ).data
        )

    def partial_update(self, request, pk=None):
        """Change the status of a transaction"""
        affiliate_transaction = get_ledger().get_transaction(pk)
        if affiliate_transaction is None:
            raise NotFound(f"Transaction {pk} does not exist")
        serializer = AffiliateTransactionSerializer(
            affiliate_transaction, data=request.data, partial=True
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class AffiliateStatsView(APIView):
    """Staff API for the dashboard numbers and per-affiliate commission summaries"""

    authentication_classes = (SessionAuthentication,)
    permission_classes = (IsAdminUser,)

    def get(self, request, *args, **kwargs):  # noqa: ARG002
        """Return dashboard numbers and commission summaries for the requested date range"""
        return Response(
            {
                "dashboard": DashboardStatsSerializer(get_dashboard_stats()).data,
                "commissions": CommissionSummarySerializer(
                    summarize_commissions(_filtered_transactions(request.query_params)),
                    many=True,
                ).data,
            }
        )


class AffiliateAccountView(APIView):
    """The affiliate record and transactions of the logged in user"""

    authentication_classes = (SessionAuthentication,)
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):  # noqa: ARG002
        """Return the user's affiliate record, or 404 if the user isn't an affiliate"""
        affiliate = api.get_affiliate_by_email(request.user.email)
        if affiliate is None:
            raise NotFound("You are not an affiliate")
        return Response(
            AffiliateAccountSerializer(
                {
                    "affiliate": affiliate,
                    "transactions": api.get_transactions_for_affiliate(affiliate.code),
                }
            ).data
        )


def commission_report_csv_view(request):
    """View for returning the commission report as a csv file"""
    if not (request.user and request.user.is_staff):
        raise PermissionDenied
    try:
        transactions = _filtered_transactions(request.GET)
    except ValidationError as exc:
        return HttpResponseBadRequest(str(exc.detail))
    return make_csv_http_response(
        csv_rows=commission_report_rows(summarize_commissions(transactions)),
        filename=commission_report_filename(),
        fieldnames=COMMISSION_REPORT_COLUMNS,
    )
