"""Affiliate app factories"""

from decimal import Decimal

import factory
from factory import fuzzy
from factory.django import DjangoModelFactory

from affiliate import models
from affiliate.constants import TRANSACTION_STATUS_PENDING


class AffiliateFactory(DjangoModelFactory):
    """Factory for Affiliate"""

    code = factory.Sequence("AFFILIATE{0}".format)
    name = factory.Faker("name")
    email = factory.Sequence("affiliate{0}@example.com".format)
    discount_percent = 15
    is_active = True

    class Meta:
        model = models.Affiliate


class AffiliateTransactionFactory(DjangoModelFactory):
    """Factory for AffiliateTransaction"""

    affiliate_code = factory.Sequence("AFFILIATE{0}".format)
    affiliate_name = factory.Faker("name")
    affiliate_email = factory.Sequence("affiliate{0}@example.com".format)
    order_number = factory.Sequence("RDR-{0}".format)
    order_total = fuzzy.FuzzyDecimal(low=10, high=500)
    commission_amount = factory.LazyAttribute(
        lambda txn: (txn.order_total * Decimal("0.10")).quantize(Decimal("0.01"))
    )
    points_earned = factory.LazyAttribute(
        lambda txn: (txn.order_total * Decimal("0.015")).quantize(Decimal("0.01"))
    )
    customer_email = factory.Faker("email")
    status = TRANSACTION_STATUS_PENDING

    class Meta:
        model = models.AffiliateTransaction
