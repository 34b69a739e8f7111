"""Views for the entity store webhook"""
import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from entitystore.permissions import IsSignedByEntityStore
from entitystore.signals import ENTITY_EVENTS, entity_changed

log = logging.getLogger(__name__)


class EntityChangeWebhookView(APIView):
    """
    Receives change notifications from the remote entity store. Instead of authenticating
    via session this looks at the signature of the message to verify authenticity.
    """

    authentication_classes = ()
    permission_classes = (IsSignedByEntityStore,)

    def post(self, request, *args, **kwargs):  # noqa: ARG002
        """
        Relay a change notification to the entity_changed signal
        """
        payload = request.data if isinstance(request.data, dict) else {}
        entity_name = payload.get("entity")
        event = payload.get("event")
        data = payload.get("data") or {}
        if not entity_name or event not in ENTITY_EVENTS:
            raise ValidationError(
                {"event": f"Unknown change notification {entity_name}/{event}"}
            )
        if not isinstance(data, dict):
            raise ValidationError({"data": "The changed record must be an object."})
        log.info(
            "Entity store reported %s of %s %s", event, entity_name, data.get("id")
        )
        entity_changed.send(
            sender=self.__class__, entity_name=entity_name, event=event, data=data
        )
        return Response(status=status.HTTP_200_OK)
