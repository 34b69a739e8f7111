"""
Functions for ecommerce
"""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import NamedTuple, Optional

from django.conf import settings
from django.db import transaction
from rest_framework.exceptions import ValidationError

from affiliate.api import get_active_affiliate_by_code
from affiliate.tasks import record_affiliate_order
from ecommerce.constants import (
    DISCOUNT_TYPE_DOLLARS_OFF,
    DISCOUNT_TYPE_PERCENT_OFF,
    INVALID_PROMO_CODE_MESSAGE,
    MAX_BASKET_ITEMS,
    PROMO_CODE_MAX_LENGTH,
)
from ecommerce.exceptions import EcommerceException
from ecommerce.models import (
    Basket,
    BasketItem,
    Line,
    Order,
    ProductSpecification,
    PromoCode,
    PromotionClaim,
)
from storefront.utils import now_in_utc, positive_or_zero, round_half_up

log = logging.getLogger(__name__)


class PromoCodeDiscount(NamedTuple):
    """A promo code which resolved to a discount"""

    code: str
    discount_type: str
    amount: Decimal
    label: str
    is_affiliate: bool
    affiliate_id: Optional[str]


class ValidatedBasket(NamedTuple):
    """A Basket and related objects that have been validated to be ready for checkout"""

    basket: Basket
    items: list[BasketItem]
    subtotal: Decimal
    discount: Optional[PromoCodeDiscount]
    discount_amount: Decimal


def normalize_code(code):
    """
    Normalize a promo code the way customers are allowed to type it

    Args:
        code (str): A promo code

    Returns:
        str: The code without surrounding whitespace, uppercased
    """
    return (code or "").strip().upper()


def validate_promo_code(code, ledger=None):
    """
    Resolve a promo code to a discount. Storefront promo codes are checked first, then the codes
    of active affiliates. Affiliates are read from the ledger on every call.

    Args:
        code (str): The code as entered by the customer
        ledger (Ledger): The affiliate ledger, by default the selected ledger

    Returns:
        Optional[PromoCodeDiscount]: The discount, or None if the code is unknown or inactive
    """
    code = normalize_code(code)
    if not code or len(code) > PROMO_CODE_MAX_LENGTH:
        return None

    promo_code = PromoCode.objects.currently_valid().filter(code__iexact=code).first()
    if promo_code is not None:
        return PromoCodeDiscount(
            code=promo_code.code,
            discount_type=promo_code.discount_type,
            amount=promo_code.amount,
            label=promo_code.label,
            is_affiliate=False,
            affiliate_id=None,
        )

    affiliate = get_active_affiliate_by_code(code, ledger=ledger)
    if affiliate is not None:
        return PromoCodeDiscount(
            code=affiliate.code,
            discount_type=DISCOUNT_TYPE_PERCENT_OFF,
            amount=Decimal(affiliate.discount_percent) / 100,
            label=f"{affiliate.discount_percent}% off",
            is_affiliate=True,
            affiliate_id=affiliate.id,
        )

    log.info("Promo code %s did not resolve to a discount", code)
    return None


def get_discount_amount(discount, subtotal):
    """
    Calculate the amount taken off a subtotal by a discount

    Args:
        discount (PromoCodeDiscount): A resolved discount
        subtotal (decimal.Decimal): The basket subtotal

    Returns:
        decimal.Decimal: The discount amount, rounded to cents, between zero and the subtotal
    """
    subtotal = Decimal(subtotal)
    if discount.discount_type == DISCOUNT_TYPE_PERCENT_OFF:
        amount = round_half_up(subtotal * discount.amount)
    elif discount.discount_type == DISCOUNT_TYPE_DOLLARS_OFF:
        amount = round_half_up(discount.amount)
    else:
        raise EcommerceException(f"Unknown discount type {discount.discount_type}")
    return min(positive_or_zero(amount), positive_or_zero(subtotal))


def compute_discount(code, subtotal, ledger=None):
    """
    Calculate the discount a code gives on a subtotal

    Args:
        code (str): The code as entered by the customer
        subtotal (decimal.Decimal): The basket subtotal
        ledger (Ledger): The affiliate ledger

    Returns:
        Optional[decimal.Decimal]: The discount amount, or None if the code doesn't resolve
    """
    discount = validate_promo_code(code, ledger=ledger)
    if discount is None:
        return None
    return get_discount_amount(discount, subtotal)


def get_or_create_basket(user):
    """
    Get the user's basket, creating it on the first cart interaction

    Args:
        user (User): The user

    Returns:
        Basket: The basket
    """
    basket, _ = Basket.objects.get_or_create(user=user)
    return basket


def get_basket_subtotal(basket):
    """Sum the current price of everything in a basket"""
    return sum(
        (
            item.specification.price * item.quantity
            for item in basket.basketitems.select_related("specification")
        ),
        Decimal(0),
    )


def set_basket_items(basket, items):
    """
    Replace the contents of a basket

    Args:
        basket (Basket): The basket
        items (list of dict): Dicts with a specification id and a quantity. A quantity of zero removes the item.
    """
    items = [item for item in items if item["quantity"] > 0]
    if len(items) > MAX_BASKET_ITEMS:
        raise ValidationError(
            {"items": f"A basket can hold at most {MAX_BASKET_ITEMS} items."}
        )
    specification_ids = [item["specification_id"] for item in items]
    if len(set(specification_ids)) != len(specification_ids):
        raise ValidationError({"items": "Each product may only appear once."})
    specifications = ProductSpecification.objects.select_related("product").in_bulk(
        specification_ids
    )
    for item in items:
        specification = specifications.get(item["specification_id"])
        if specification is None or not specification.product.is_active:
            raise ValidationError(
                {"items": f"Invalid product specification {item['specification_id']}"}
            )

    with transaction.atomic():
        basket.basketitems.exclude(specification_id__in=specification_ids).delete()
        for item in items:
            BasketItem.objects.update_or_create(
                basket=basket,
                specification_id=item["specification_id"],
                defaults={"quantity": item["quantity"]},
            )
        # touch the basket so it doesn't expire while in use
        basket.save()


def apply_promo_code(basket, code, ledger=None):
    """
    Validate a promo code and store it on the basket, replacing any earlier code

    Args:
        basket (Basket): The basket
        code (str): The code as entered by the customer
        ledger (Ledger): The affiliate ledger

    Returns:
        PromoCodeDiscount: The resolved discount
    """
    discount = validate_promo_code(code, ledger=ledger)
    if discount is None:
        raise ValidationError({"promo_code": INVALID_PROMO_CODE_MESSAGE})
    basket.promo_code = discount.code
    basket.save()
    log.info("Applied promo code %s to basket %s", discount.code, basket.id)
    return discount


def remove_promo_code(basket):
    """Remove the promo code from a basket"""
    basket.promo_code = ""
    basket.save()


def _validate_basket_items(basket):
    """
    Verifies that the contents of the basket can be purchased

    Args:
        basket (Basket): The basket being validated

    Returns:
        list of BasketItem: The basket items
    """
    items = list(basket.basketitems.all())
    if len(items) == 0:
        raise ValidationError(
            {"items": "No items in basket. Cannot complete checkout."}
        )
    if len(items) > MAX_BASKET_ITEMS:
        raise ValidationError(
            {"items": f"A basket can hold at most {MAX_BASKET_ITEMS} items."}
        )
    for item in items:
        specification = item.specification
        if item.quantity < 1:
            raise ValidationError(
                {"items": f"Invalid quantity for {specification.product.name}"}
            )
        if not specification.product.is_active:
            log.error(
                "User %s is checking out with a product which is not active (%s).",
                basket.user.email,
                specification.product.name,
            )
            raise ValidationError(
                {"items": f"{specification.product.name} can no longer be purchased."}
            )
        if (
            specification.stock_quantity is not None
            and specification.stock_quantity < item.quantity
        ):
            raise ValidationError(
                {
                    "items": f"Insufficient stock for {specification.product.name} - {specification.name}"
                }
            )
    return items


def validate_basket_for_checkout(user, ledger=None):
    """
    Validate basket for checkout. Prices are always read from the database and the stored promo
    code is resolved again.

    Args:
        user (User): The user whose basket needs validation
        ledger (Ledger): The affiliate ledger

    Returns:
        ValidatedBasket: The validated Basket and related objects
    """
    basket = (
        Basket.objects.prefetch_related("basketitems__specification__product")
        .filter(user=user)
        .first()
    )
    if basket is None:
        raise ValidationError(
            {"items": "No items in basket. Cannot complete checkout."}
        )
    items = _validate_basket_items(basket)
    subtotal = sum(
        (item.specification.price * item.quantity for item in items), Decimal(0)
    )

    discount = None
    discount_amount = Decimal(0)
    if basket.promo_code:
        discount = validate_promo_code(basket.promo_code, ledger=ledger)
        if discount is None:
            raise ValidationError({"promo_code": INVALID_PROMO_CODE_MESSAGE})
        discount_amount = get_discount_amount(discount, subtotal)

    return ValidatedBasket(
        basket=basket,
        items=items,
        subtotal=subtotal,
        discount=discount,
        discount_amount=discount_amount,
    )


def create_order(validated_basket):
    """
    Create an order and its lines from a validated basket

    Args:
        validated_basket (ValidatedBasket): The validated basket

    Returns:
        Order: A new order
    """
    discount = validated_basket.discount
    shipping_amount = settings.SHIPPING_COST
    with transaction.atomic():
        order = Order.objects.create(
            purchaser=validated_basket.basket.user,
            subtotal=validated_basket.subtotal,
            discount_amount=validated_basket.discount_amount,
            shipping_amount=shipping_amount,
            total_amount=validated_basket.subtotal
            - validated_basket.discount_amount
            + shipping_amount,
            promo_code=discount.code if discount else "",
            affiliate_code=discount.code if discount and discount.is_affiliate else "",
        )
        order.order_number = Order.make_order_number(order.id)
        order.save(update_fields=["order_number"])
        Line.objects.bulk_create(
            Line(
                order=order,
                specification=item.specification,
                product_name=item.specification.product.name,
                specification_name=item.specification.name,
                quantity=item.quantity,
                price=item.specification.price,
            )
            for item in validated_basket.items
        )
    log.info(
        "Created order %s for %s with total %s",
        order.order_number,
        validated_basket.basket.user.email,
        order.total_amount,
    )
    return order


def clear_and_delete_baskets(user=None):
    """
    Delete baskets and all the associated items.

    Args:
       user (User, optional): The user whose baskets should be deleted. If not provided, expired baskets will be deleted.
    """
    cutoff_date = now_in_utc() - timedelta(days=settings.BASKET_EXPIRY_DAYS)
    basket_filter = {"user": user} if user else {"updated_on__lte": cutoff_date}

    with transaction.atomic():
        baskets = Basket.objects.select_for_update(skip_locked=True).filter(
            **basket_filter
        )
        log.info(
            "Basket deletion requested for baskets Ids: %s",
            [basket.id for basket in baskets],
        )
        for basket in baskets:
            log.info("Clearing and deleting basket with Id: %s", basket.id)

            with transaction.atomic():
                basket_items = basket.basketitems.all()
                log.info(
                    "Deleting basket items: %s",
                    list(basket_items.values_list("id", flat=True)),
                )
                basket_items.delete()

                log.info("Deleting basket: %s", basket.id)
                basket.delete()


def complete_order(order):
    """
    Takes purchased items out of stock, gets rid of the basket so that the user starts fresh next
    time, and schedules the affiliate commission once the order is committed.

    Args:
        order (Order): A newly created order
    """
    with transaction.atomic():
        for line in order.lines.all():
            specification = ProductSpecification.objects.select_for_update().get(
                id=line.specification_id
            )
            if specification.stock_quantity is None:
                continue
            if specification.stock_quantity < line.quantity:
                raise EcommerceException(
                    f"Insufficient stock for {line.product_name} - {line.specification_name} on order {order.order_number}"
                )
            specification.stock_quantity -= line.quantity
            specification.save(update_fields=["stock_quantity", "updated_on"])

        clear_and_delete_baskets(order.purchaser)

        if order.affiliate_code:
            transaction.on_commit(lambda: record_affiliate_order.delay(order.id))


def checkout(user, ledger=None):
    """
    Validate the user's basket, create the order and complete it in one transaction

    Args:
        user (User): The user checking out
        ledger (Ledger): The affiliate ledger

    Returns:
        Order: The completed order
    """
    validated_basket = validate_basket_for_checkout(user, ledger=ledger)
    with transaction.atomic():
        order = create_order(validated_basket)
        complete_order(order)
    return order


def has_claimed_promotion(email, promotion):
    """Whether an email address already submitted a one-time promotion"""
    return PromotionClaim.objects.filter(
        email__iexact=email, promotion=promotion
    ).exists()


def claim_promotion(email, promotion):
    """
    Record that an email address submitted a one-time promotion

    Args:
        email (str): The email address
        promotion (str): The promotion name

    Returns:
        bool: True if this is the first claim, False if the promotion was already claimed
    """
    if has_claimed_promotion(email, promotion):
        return False
    _, created = PromotionClaim.objects.get_or_create(
        email=email.lower(), promotion=promotion
    )
    if created:
        log.info("%s claimed promotion %s", email, promotion)
    return created
