"""Permission classes for the entity store webhook"""
import hashlib
import hmac
import logging

from django.conf import settings
from rest_framework.permissions import BasePermission

log = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Entity-Signature"


def generate_webhook_signature(body):
    """
    Generate an HMAC SHA256 signature for a webhook request body

    Args:
        body (bytes): The raw request body

    Returns:
        str: The hex encoded signature
    """
    return hmac.new(
        settings.ENTITY_STORE_WEBHOOK_SECRET.encode("utf-8"),
        msg=body,
        digestmod=hashlib.sha256,
    ).hexdigest()


class IsSignedByEntityStore(BasePermission):
    """
    Confirms that the message is signed by the entity store
    """

    def has_permission(self, request, view):  # noqa: ARG002
        """
        Returns true if the request body is signed with the shared webhook secret
        """
        if not settings.ENTITY_STORE_WEBHOOK_SECRET:
            log.error("Entity store webhook received but no webhook secret is configured")
            return False
        received = request.headers.get(SIGNATURE_HEADER, "")
        signature = generate_webhook_signature(request.body)
        if hmac.compare_digest(received, signature):
            return True
        log.error(
            "Entity store signature failed: we expected %s but we got %s",
            signature,
            received,
        )
        return False
