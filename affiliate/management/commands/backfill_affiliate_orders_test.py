"""Tests for the backfill_affiliate_orders command"""
from io import StringIO

import pytest
from django.core.management import call_command

from affiliate.api import BackfillResult


@pytest.mark.parametrize(
    "args, expected_output",
    [
        ([], "Tagged 2 of 5 orders."),
        (["--dry-run"], "Would tag 2 of 5 orders (dry run)."),
    ],
)
def test_backfill_affiliate_orders(mocker, args, expected_output):
    """The command should run the backfill and report the counts"""
    backfill = mocker.patch(
        "affiliate.management.commands.backfill_affiliate_orders.backfill_affiliate_orders",
        return_value=BackfillResult(patched=2, total=5),
    )
    out = StringIO()
    call_command("backfill_affiliate_orders", *args, stdout=out)
    backfill.assert_called_once_with(dry_run=bool(args))
    assert expected_output in out.getvalue()
