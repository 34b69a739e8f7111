"""
Tests for the entity store client
"""
import pytest
import requests
import responses
from responses import matchers

from entitystore.client import EntityStoreClient
from entitystore.exceptions import (
    EntityStoreError,
    EntityStoreNotSupported,
    EntityStoreUnavailable,
)

BASE_URL = "https://entities.example.com/api"


@pytest.fixture(autouse=True)
def entity_store_settings(settings):
    """Point the client at a fake entity store"""
    settings.ENTITY_STORE_BASE_URL = f"{BASE_URL}/"
    settings.ENTITY_STORE_API_KEY = "test_entity_store_api_key"
    settings.ENTITY_STORE_REQUEST_TIMEOUT = 5


def test_list(mocked_responses):
    """list() should pass sort, limit and filters as query params and send the api key"""
    mocked_responses.add(
        responses.GET,
        f"{BASE_URL}/entities/Affiliate",
        json=[{"id": "abc", "code": "JANE15"}],
        match=[
            matchers.query_param_matcher(
                {"sort": "-created_date", "limit": "1", "is_active": "true"}
            ),
            matchers.header_matcher(
                {"api_key": "test_entity_store_api_key"}
            ),
        ],
    )
    records = EntityStoreClient().list(
        "Affiliate", sort="-created_date", limit=1, is_active="true"
    )
    assert records == [{"id": "abc", "code": "JANE15"}]


def test_get_missing_record(mocked_responses):
    """get() should return None for a record which doesn't exist"""
    mocked_responses.add(
        responses.GET, f"{BASE_URL}/entities/Affiliate/missing", status=404
    )
    assert EntityStoreClient().get("Affiliate", "missing") is None


def test_create_update_delete(mocked_responses):
    """Writes should send JSON bodies to the entity urls"""
    mocked_responses.add(
        responses.POST,
        f"{BASE_URL}/entities/AffiliateTransaction",
        json={"id": "t1", "order_number": "RDR-1"},
        match=[matchers.json_params_matcher({"order_number": "RDR-1"})],
    )
    mocked_responses.add(
        responses.PUT,
        f"{BASE_URL}/entities/AffiliateTransaction/t1",
        json={"id": "t1", "status": "paid"},
        match=[matchers.json_params_matcher({"status": "paid"})],
    )
    mocked_responses.add(
        responses.DELETE, f"{BASE_URL}/entities/AffiliateTransaction/t1", body=""
    )
    client = EntityStoreClient()
    assert client.create("AffiliateTransaction", {"order_number": "RDR-1"}) == {
        "id": "t1",
        "order_number": "RDR-1",
    }
    assert client.update("AffiliateTransaction", "t1", {"status": "paid"}) == {
        "id": "t1",
        "status": "paid",
    }
    assert client.delete("AffiliateTransaction", "t1") is None


@pytest.mark.parametrize(
    "status_code,exception_class",
    [
        [404, EntityStoreNotSupported],
        [500, EntityStoreUnavailable],
        [503, EntityStoreUnavailable],
        [400, EntityStoreError],
    ],
)
def test_error_responses(mocked_responses, status_code, exception_class):
    """Unsuccessful responses should be raised as entity store errors"""
    mocked_responses.add(
        responses.GET, f"{BASE_URL}/entities/Affiliate", status=status_code
    )
    with pytest.raises(exception_class):
        EntityStoreClient().list("Affiliate")


def test_connection_error(mocked_responses):
    """Connection problems should be raised as EntityStoreUnavailable"""
    mocked_responses.add(
        responses.GET,
        f"{BASE_URL}/entities/Affiliate",
        body=requests.exceptions.ConnectTimeout("timed out"),
    )
    with pytest.raises(EntityStoreUnavailable):
        EntityStoreClient().list("Affiliate")


def test_not_configured(settings):
    """No request should be made if no entity store is configured"""
    settings.ENTITY_STORE_BASE_URL = None
    with pytest.raises(EntityStoreUnavailable):
        EntityStoreClient().list("Affiliate")
