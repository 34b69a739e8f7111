"""affiliate app settings"""

from django.apps import AppConfig


class AffiliateConfig(AppConfig):
    """AppConfig for affiliates"""

    name = "affiliate"

    def ready(self):
        """Application is ready"""
        from affiliate.ledger import register_change_listener
        from affiliate.reports import invalidate_dashboard_stats

        register_change_listener(invalidate_dashboard_stats)
