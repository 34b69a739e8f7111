"""
Tags old discounted orders with the affiliate whose code they most likely used.

Orders placed before affiliate codes were recorded on orders only carry the discount amount. The
discount percent is derived from discount_amount / subtotal and matched against the affiliates'
discount_percent.

Arguments:
* --dry-run - report what would be tagged without saving anything
"""
from django.core.management import BaseCommand

from affiliate.api import backfill_affiliate_orders


class Command(BaseCommand):
    """
    Tags old discounted orders with an affiliate code.
    """

    help = "Tags old discounted orders with the affiliate whose discount percent they received."

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "--dry-run",
            action="store_true",
            dest="dry_run",
            help="Report the orders which would be tagged without saving them",
        )

    def handle(self, *args, **kwargs):  # noqa: ARG002
        result = backfill_affiliate_orders(dry_run=kwargs["dry_run"])
        if kwargs["dry_run"]:
            self.stdout.write(
                f"Would tag {result.patched} of {result.total} orders (dry run)."
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(f"Tagged {result.patched} of {result.total} orders.")
            )
