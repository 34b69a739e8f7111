"""
Factories for ecommerce models
"""
from factory import Faker, SubFactory, fuzzy, Sequence
from factory.django import DjangoModelFactory

from ecommerce import models
from ecommerce.constants import CONTENT_KIND_STANDARD, DISCOUNT_TYPE_PERCENT_OFF
from users.factories import UserFactory


class ProductFactory(DjangoModelFactory):
    """Factory for Product"""

    name = Sequence("Product {0}".format)
    description = Faker("sentence")
    content_kind = CONTENT_KIND_STANDARD
    is_active = True

    class Meta:
        model = models.Product


class ProductSpecificationFactory(DjangoModelFactory):
    """Factory for ProductSpecification"""

    product = SubFactory(ProductFactory)
    name = Sequence("{0}mg".format)
    price = fuzzy.FuzzyDecimal(low=1, high=123)
    stock_quantity = None

    class Meta:
        model = models.ProductSpecification


class BasketFactory(DjangoModelFactory):
    """Factory for Basket"""

    user = SubFactory(UserFactory)

    class Meta:
        model = models.Basket


class BasketItemFactory(DjangoModelFactory):
    """Factory for BasketItem"""

    basket = SubFactory(BasketFactory)
    specification = SubFactory(ProductSpecificationFactory)
    quantity = fuzzy.FuzzyInteger(1, 5)

    class Meta:
        model = models.BasketItem


class PromoCodeFactory(DjangoModelFactory):
    """Factory for PromoCode"""

    code = Sequence("PROMO{0}".format)
    discount_type = DISCOUNT_TYPE_PERCENT_OFF
    amount = fuzzy.FuzzyDecimal(0.05, 0.5, precision=2)
    label = Faker("sentence", nb_words=3)
    is_active = True

    class Meta:
        model = models.PromoCode


class OrderFactory(DjangoModelFactory):
    """Factory for Order"""

    purchaser = SubFactory(UserFactory)
    order_number = Sequence("TEST-{0}".format)
    subtotal = fuzzy.FuzzyDecimal(low=10, high=500)
    discount_amount = 0
    shipping_amount = 15
    total_amount = fuzzy.FuzzyDecimal(low=25, high=515)

    class Meta:
        model = models.Order


class LineFactory(DjangoModelFactory):
    """Factory for Line"""

    order = SubFactory(OrderFactory)
    specification = SubFactory(ProductSpecificationFactory)
    product_name = Faker("word")
    specification_name = Faker("word")
    quantity = fuzzy.FuzzyInteger(1, 5)
    price = fuzzy.FuzzyDecimal(low=1, high=123)

    class Meta:
        model = models.Line


class PromotionClaimFactory(DjangoModelFactory):
    """Factory for PromotionClaim"""

    email = Faker("email")
    promotion = Sequence("promotion-{0}".format)

    class Meta:
        model = models.PromotionClaim
