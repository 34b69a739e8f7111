from decimal import Decimal

from django.db import migrations

PROMO_CODES = [
    ("SAVE10", Decimal("0.10"), "10% off"),
    ("SAVE20", Decimal("0.20"), "20% off"),
    ("WELCOME", Decimal("0.15"), "15% off first order"),
    ("FIRSTDAY15", Decimal("0.15"), "15% off"),
    ("INDO88", Decimal("0.10"), "10% off"),
]


def add_promo_codes(apps, schema_editor):
    """Create the storefront-wide promo codes"""
    PromoCode = apps.get_model("ecommerce", "PromoCode")
    for code, amount, label in PROMO_CODES:
        PromoCode.objects.get_or_create(
            code=code,
            defaults={
                "discount_type": "percent-off",
                "amount": amount,
                "label": label,
                "is_active": True,
            },
        )


def remove_promo_codes(apps, schema_editor):
    """Delete the storefront-wide promo codes"""
    PromoCode = apps.get_model("ecommerce", "PromoCode")
    PromoCode.objects.filter(code__in=[code for code, _, _ in PROMO_CODES]).delete()


class Migration(migrations.Migration):

    dependencies = [("ecommerce", "0001_initial")]

    operations = [migrations.RunPython(add_promo_codes, remove_promo_codes)]
