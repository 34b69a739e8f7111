"""Fixtures that will be used by default"""
import pytest
from django.core.cache import cache

from affiliate.ledger import reset_ledger


@pytest.fixture(autouse=True)
def local_ledger(settings):
    """Use the local ledger unless a test configures the entity store"""
    settings.ENTITY_STORE_BASE_URL = None
    reset_ledger()
    cache.clear()
    yield
    reset_ledger()
    cache.clear()
