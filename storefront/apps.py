"""
Django app
"""

from django.apps import AppConfig


class RootConfig(AppConfig):
    """AppConfig for this project"""

    name = "storefront"

    def ready(self):
        from storefront import envs

        envs.validate()
