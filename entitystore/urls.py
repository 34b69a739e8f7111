"""URLs for the entity store webhook"""
from django.urls import path

from entitystore.views import EntityChangeWebhookView

urlpatterns = [
    path(
        "api/entitystore/webhook/",
        EntityChangeWebhookView.as_view(),
        name="entitystore-webhook",
    ),
]
