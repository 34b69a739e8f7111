"""Serializers for the affiliate program"""
from rest_framework import serializers

from affiliate import api
from affiliate.constants import DATE_RANGE_ALL, DATE_RANGES, TRANSACTION_STATUSES


def _money_field(**kwargs):
    return serializers.DecimalField(
        max_digits=14, decimal_places=2, read_only=True, **kwargs
    )


class AffiliateSerializer(serializers.Serializer):
    """
    Serializer for affiliate records. Writes go through affiliate.api so that codes are
    normalized and checked for duplicates in whichever ledger is in use.
    """

    id = serializers.CharField(read_only=True)
    code = serializers.CharField(required=False, allow_blank=True)
    name = serializers.CharField(required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    discount_percent = serializers.IntegerField(required=False)
    is_active = serializers.BooleanField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    total_points = _money_field()
    total_commission = _money_field()
    total_orders = serializers.IntegerField(read_only=True)
    total_revenue = _money_field()
    created_on = serializers.DateTimeField(read_only=True)

    def create(self, validated_data):
        return api.create_affiliate(**validated_data)

    def update(self, instance, validated_data):
        return api.update_affiliate(instance.id, **validated_data)


class AffiliateTransactionSerializer(serializers.Serializer):
    """Serializer for affiliate transactions. Only the status can be changed."""

    id = serializers.CharField(read_only=True)
    affiliate_code = serializers.CharField(read_only=True)
    affiliate_name = serializers.CharField(read_only=True)
    affiliate_email = serializers.CharField(read_only=True)
    order_number = serializers.CharField(read_only=True)
    order_total = _money_field()
    commission_amount = _money_field()
    points_earned = _money_field()
    customer_email = serializers.CharField(read_only=True)
    reason = serializers.CharField(read_only=True)
    status = serializers.ChoiceField(choices=TRANSACTION_STATUSES)
    created_on = serializers.DateTimeField(read_only=True)

    def update(self, instance, validated_data):
        if "status" not in validated_data:
            return instance
        return api.update_transaction_status(instance.id, validated_data["status"])


class PointsAdjustmentSerializer(serializers.Serializer):
    """Input for a manual points adjustment"""

    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class GenerateCodeSerializer(serializers.Serializer):
    """Input for generating a code suggestion"""

    name = serializers.CharField(required=False, allow_blank=True, default="")


class TransactionFilterSerializer(serializers.Serializer):
    """Query parameters for transaction lists and the commission report"""

    date_range = serializers.ChoiceField(
        choices=DATE_RANGES, required=False, default=DATE_RANGE_ALL
    )
    start = serializers.DateField(required=False, default=None)
    end = serializers.DateField(required=False, default=None)
    status = serializers.ChoiceField(
        choices=TRANSACTION_STATUSES, required=False, default=None
    )
    search = serializers.CharField(required=False, allow_blank=True, default="")


class CommissionSummarySerializer(serializers.Serializer):
    """Serializer for per-affiliate commission summaries"""

    name = serializers.CharField()
    email = serializers.CharField()
    code = serializers.CharField()
    total_orders = serializers.IntegerField()
    total_revenue = _money_field()
    total_commission = _money_field()
    pending_commission = _money_field()
    paid_commission = _money_field()
    points_earned = _money_field()


class DashboardStatsSerializer(serializers.Serializer):
    """Serializer for the affiliate dashboard numbers"""

    total_affiliates = serializers.IntegerField()
    active_affiliates = serializers.IntegerField()
    total_commission_owed = _money_field()
    total_points_issued = _money_field()
    total_revenue = _money_field()
    total_transactions = serializers.IntegerField()


class AffiliateAccountSerializer(serializers.Serializer):
    """An affiliate's own record and transactions"""

    affiliate = AffiliateSerializer()
    transactions = AffiliateTransactionSerializer(many=True)
