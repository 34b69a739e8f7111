"""Tests for affiliate views"""
import csv
import io
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from affiliate.constants import (
    COMMISSION_REPORT_COLUMNS,
    TRANSACTION_STATUS_CANCELLED,
    TRANSACTION_STATUS_PAID,
    TRANSACTION_STATUS_PENDING,
)
from affiliate.exceptions import LedgerError
from affiliate.factories import AffiliateFactory, AffiliateTransactionFactory
from affiliate.models import Affiliate, AffiliateTransaction

pytestmark = pytest.mark.django_db


@pytest.mark.parametrize(
    "url_name",
    ["affiliates_api-list", "affiliate_transactions_api-list", "affiliate_stats_api"],
)
def test_staff_only(user_drf_client, url_name):
    """Affiliate management should be limited to staff"""
    assert user_drf_client.get(reverse(url_name)).status_code == status.HTTP_403_FORBIDDEN


def test_list_affiliates(staff_drf_client):
    """Affiliates should be listed newest first"""
    older = AffiliateFactory.create()
    newer = AffiliateFactory.create()
    resp = staff_drf_client.get(reverse("affiliates_api-list"))
    assert resp.status_code == status.HTTP_200_OK
    assert [item["id"] for item in resp.json()] == [str(newer.id), str(older.id)]


def test_retrieve_affiliate(staff_drf_client):
    """A single affiliate should be returned with its totals"""
    affiliate = AffiliateFactory.create(
        code="JANE15", total_points=Decimal("3.45"), total_orders=1
    )
    resp = staff_drf_client.get(
        reverse("affiliates_api-detail", kwargs={"pk": affiliate.id})
    )
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["code"] == "JANE15"
    assert resp.json()["total_points"] == "3.45"
    assert resp.json()["total_orders"] == 1


def test_retrieve_missing_affiliate(staff_drf_client):
    """An unknown affiliate should be a 404"""
    resp = staff_drf_client.get(reverse("affiliates_api-detail", kwargs={"pk": 999}))
    assert resp.status_code == status.HTTP_404_NOT_FOUND


def test_create_affiliate(staff_drf_client):
    """A new affiliate should be created with a normalized code"""
    resp = staff_drf_client.post(
        reverse("affiliates_api-list"),
        {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "code": "jane-15",
            "discount_percent": 15,
        },
    )
    assert resp.status_code == status.HTTP_201_CREATED
    assert resp.json()["code"] == "JANE15"
    assert resp.json()["total_commission"] == "0.00"
    assert Affiliate.objects.get(code="JANE15").email == "jane@example.com"


def test_create_affiliate_duplicate(staff_drf_client):
    """A duplicate code should be a validation error naming the other affiliate"""
    AffiliateFactory.create(code="JANE15", name="Jane Doe")
    resp = staff_drf_client.post(
        reverse("affiliates_api-list"),
        {"name": "Janet", "email": "janet@example.com", "code": "JANE15"},
    )
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert resp.json() == {
        "errors": {
            "code": [
                'The code "JANE15" is already in use by Jane Doe. Please choose a different code.'
            ]
        }
    }


def test_partial_update_affiliate(staff_drf_client):
    """Deactivating an affiliate through the API should be saved"""
    affiliate = AffiliateFactory.create(is_active=True)
    resp = staff_drf_client.patch(
        reverse("affiliates_api-detail", kwargs={"pk": affiliate.id}),
        {"is_active": False},
    )
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["is_active"] is False
    affiliate.refresh_from_db()
    assert affiliate.is_active is False


def test_delete_affiliate(staff_drf_client):
    """Deleting an affiliate should be a 204"""
    affiliate = AffiliateFactory.create()
    resp = staff_drf_client.delete(
        reverse("affiliates_api-detail", kwargs={"pk": affiliate.id})
    )
    assert resp.status_code == status.HTTP_204_NO_CONTENT
    assert not Affiliate.objects.exists()


def test_adjust_points(staff_drf_client, staff_user):
    """Adjusting points should return the affiliate and the adjustment transaction"""
    affiliate = AffiliateFactory.create(total_points=Decimal("10.00"))
    resp = staff_drf_client.post(
        reverse("affiliates_api-adjust-points", kwargs={"pk": affiliate.id}),
        {"amount": "-2.50", "reason": "Redeemed"},
    )
    assert resp.status_code == status.HTTP_201_CREATED
    assert resp.json()["affiliate"]["total_points"] == "7.50"
    assert resp.json()["transaction"]["points_earned"] == "-2.50"
    assert resp.json()["transaction"]["status"] == TRANSACTION_STATUS_PAID
    assert resp.json()["transaction"]["customer_email"] == staff_user.email


def test_adjust_points_zero(staff_drf_client):
    """A zero adjustment should be rejected"""
    affiliate = AffiliateFactory.create()
    resp = staff_drf_client.post(
        reverse("affiliates_api-adjust-points", kwargs={"pk": affiliate.id}),
        {"amount": "0", "reason": ""},
    )
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert not AffiliateTransaction.objects.exists()


def test_generate_code(staff_drf_client, mocker):
    """A code suggestion should be returned"""
    mocker.patch("affiliate.api.random.randint", return_value=15)
    resp = staff_drf_client.post(
        reverse("affiliates_api-generate-code"), {"name": "Jane Doe"}
    )
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == {"code": "JANE15"}


def test_recheck_storage(staff_drf_client):
    """The name of the ledger in use should be returned"""
    resp = staff_drf_client.post(reverse("affiliates_api-recheck-storage"))
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json() == {"ledger": "local"}


def test_ledger_unavailable(staff_drf_client, mocker):
    """A 503 should be returned when neither ledger can be used"""
    mocker.patch(
        "affiliate.ledger.LocalLedger.list_affiliates",
        side_effect=LedgerError("Unable to list affiliates in either ledger"),
    )
    resp = staff_drf_client.get(reverse("affiliates_api-list"))
    assert resp.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


def test_list_transactions_filtered(staff_drf_client):
    """Transactions should be filtered by the status and search parameters"""
    pending = AffiliateTransactionFactory.create(order_number="RDR-100")
    AffiliateTransactionFactory.create(
        order_number="RDR-101", status=TRANSACTION_STATUS_PAID
    )
    AffiliateTransactionFactory.create(order_number="RDR-200")
    resp = staff_drf_client.get(
        reverse("affiliate_transactions_api-list"),
        {"status": TRANSACTION_STATUS_PENDING, "search": "rdr-1"},
    )
    assert resp.status_code == status.HTTP_200_OK
    assert [item["id"] for item in resp.json()] == [str(pending.id)]


def test_list_transactions_bad_range(staff_drf_client):
    """An unknown date range should be rejected"""
    resp = staff_drf_client.get(
        reverse("affiliate_transactions_api-list"), {"date_range": "forever"}
    )
    assert resp.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.parametrize(
    "current, new, expected_status",
    [
        (TRANSACTION_STATUS_PENDING, TRANSACTION_STATUS_PAID, status.HTTP_200_OK),
        (TRANSACTION_STATUS_PENDING, TRANSACTION_STATUS_CANCELLED, status.HTTP_200_OK),
        (
            TRANSACTION_STATUS_PAID,
            TRANSACTION_STATUS_PENDING,
            status.HTTP_400_BAD_REQUEST,
        ),
    ],
)
def test_update_transaction_status(staff_drf_client, current, new, expected_status):
    """Pending transactions can be paid or cancelled, nothing else"""
    txn = AffiliateTransactionFactory.create(status=current)
    resp = staff_drf_client.patch(
        reverse("affiliate_transactions_api-detail", kwargs={"pk": txn.id}),
        {"status": new},
    )
    assert resp.status_code == expected_status
    txn.refresh_from_db()
    assert txn.status == (new if expected_status == status.HTTP_200_OK else current)


def test_update_missing_transaction(staff_drf_client):
    """An unknown transaction should be a 404"""
    resp = staff_drf_client.patch(
        reverse("affiliate_transactions_api-detail", kwargs={"pk": 999}),
        {"status": TRANSACTION_STATUS_PAID},
    )
    assert resp.status_code == status.HTTP_404_NOT_FOUND


def test_affiliate_stats(staff_drf_client):
    """Dashboard numbers and per-affiliate summaries should be returned"""
    AffiliateFactory.create(
        code="JANE15",
        email="jane@example.com",
        total_points=Decimal("3.45"),
        total_revenue=Decimal("230.00"),
    )
    AffiliateTransactionFactory.create(
        affiliate_code="JANE15",
        affiliate_email="jane@example.com",
        order_total=Decimal("230.00"),
        commission_amount=Decimal("23.00"),
        points_earned=Decimal("3.45"),
    )
    resp = staff_drf_client.get(reverse("affiliate_stats_api"))
    assert resp.status_code == status.HTTP_200_OK
    data = resp.json()
    assert data["dashboard"] == {
        "total_affiliates": 1,
        "active_affiliates": 1,
        "total_commission_owed": "23.00",
        "total_points_issued": "3.45",
        "total_revenue": "230.00",
        "total_transactions": 1,
    }
    [summary] = data["commissions"]
    assert summary["code"] == "JANE15"
    assert summary["pending_commission"] == "23.00"


def test_affiliate_account(user_drf_client, user):
    """An affiliate should see their own record and transactions"""
    affiliate = AffiliateFactory.create(code="MINE10", email=user.email.upper())
    txn = AffiliateTransactionFactory.create(affiliate_code="MINE10")
    AffiliateTransactionFactory.create(affiliate_code="OTHER")
    resp = user_drf_client.get(reverse("affiliate_account_api"))
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["affiliate"]["id"] == str(affiliate.id)
    assert [item["id"] for item in resp.json()["transactions"]] == [str(txn.id)]


def test_affiliate_account_not_affiliate(user_drf_client):
    """Users who aren't affiliates should get a 404"""
    resp = user_drf_client.get(reverse("affiliate_account_api"))
    assert resp.status_code == status.HTTP_404_NOT_FOUND
    assert resp.json() == {"detail": "You are not an affiliate"}


def test_commission_report_csv(staff_client):
    """Staff should be able to download the commission report"""
    AffiliateTransactionFactory.create(
        affiliate_name="Jane Doe",
        affiliate_email="jane@example.com",
        affiliate_code="JANE15",
        order_total=Decimal("230.00"),
        commission_amount=Decimal("23.00"),
        points_earned=Decimal("3.45"),
    )
    resp = staff_client.get(reverse("affiliate_commission_report_csv"))
    assert resp.status_code == status.HTTP_200_OK
    assert resp["Content-Type"] == "text/csv"
    assert resp["Content-Disposition"].startswith(
        'attachment; filename="affiliate-commission-report-'
    )
    rows = list(csv.DictReader(io.StringIO(resp.content.decode())))
    assert list(rows[0].keys()) == COMMISSION_REPORT_COLUMNS
    assert rows == [
        dict(
            zip(
                COMMISSION_REPORT_COLUMNS,
                [
                    "Jane Doe",
                    "jane@example.com",
                    "JANE15",
                    "1",
                    "230.00",
                    "23.00",
                    "23.00",
                    "0.00",
                    "3.45",
                ],
            )
        )
    ]


def test_commission_report_csv_not_staff(user_client):
    """Non-staff users should not be able to download the report"""
    resp = user_client.get(reverse("affiliate_commission_report_csv"))
    assert resp.status_code == status.HTTP_403_FORBIDDEN


def test_commission_report_csv_bad_range(staff_client):
    """A bad date range should be a 400"""
    resp = staff_client.get(
        reverse("affiliate_commission_report_csv"), {"date_range": "forever"}
    )
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
