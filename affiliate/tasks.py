"""Affiliate tasks"""

import logging

from affiliate.api import record_order_commission
from affiliate.exceptions import LedgerError
from ecommerce.models import Order
from storefront.celery import app

log = logging.getLogger(__name__)


@app.task(
    bind=True,
    acks_late=True,
    autoretry_for=(LedgerError,),
    max_retries=5,
    retry_backoff=60,
    retry_jitter=True,
)
def record_affiliate_order(self, order_id):
    """
    Record the affiliate commission for a completed order. Running this more than once for the
    same order has no further effect.

    Args:
        order_id (int): The id of a completed Order

    Returns:
        Optional[str]: The id of the affiliate transaction
    """
    log.info("Task ID: %s", self.request.id)
    order = Order.objects.select_related("purchaser").get(id=order_id)
    if not order.affiliate_code:
        log.info("Order %s was not referred by an affiliate", order.order_number)
        return None

    affiliate_transaction = record_order_commission(
        affiliate_code=order.affiliate_code,
        order_number=order.order_number,
        order_total=order.subtotal,
        customer_email=order.purchaser.email,
    )
    if affiliate_transaction is None:
        return None
    if order.affiliate_commission != affiliate_transaction.commission_amount:
        order.affiliate_commission = affiliate_transaction.commission_amount
        order.save(update_fields=["affiliate_commission", "updated_on"])
    return affiliate_transaction.id
