"""
API client for the remote entity store
"""
from urllib.parse import quote

import requests
from django.conf import settings

from entitystore.exceptions import (
    EntityStoreError,
    EntityStoreNotSupported,
    EntityStoreUnavailable,
)


class EntityStoreClient:
    """
    API client for the remote entity store. Records are plain dicts with a string "id".
    """

    def __init__(self):
        self.api_key = settings.ENTITY_STORE_API_KEY
        self.base_url = (settings.ENTITY_STORE_BASE_URL or "").rstrip("/")
        self.request_timeout = settings.ENTITY_STORE_REQUEST_TIMEOUT

    def _entity_url(self, entity_name, entity_id=None):
        """Build the url of an entity collection, or of a single record"""
        url = f"{self.base_url}/entities/{quote(entity_name)}"
        if entity_id is not None:
            url = f"{url}/{quote(str(entity_id))}"
        return url

    def _request(self, method, url, *, allow_not_found=False, **kwargs):
        """
        Make a request to the entity store and decode the response

        Args:
            method (str): The HTTP method
            url (str): The full url
            allow_not_found (bool): If True a 404 returns None instead of raising

        Raises:
            EntityStoreUnavailable: The store could not be reached or failed with a server error
            EntityStoreNotSupported: The store returned a 404
            EntityStoreError: Any other unsuccessful response

        Returns:
            dict or list or None: The decoded JSON body
        """
        if not self.base_url:
            raise EntityStoreUnavailable("No entity store url is configured")
        try:
            response = requests.request(
                method,
                url,
                headers={"api_key": self.api_key or ""},
                timeout=self.request_timeout,
                **kwargs,
            )
        except requests.exceptions.RequestException as exc:
            raise EntityStoreUnavailable(
                f"Unable to reach the entity store at {url}: {exc}"
            ) from exc

        if response.status_code == 404:
            if allow_not_found:
                return None
            raise EntityStoreNotSupported(f"Entity store returned 404 for {url}")
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as exc:
            if response.status_code >= 500:
                raise EntityStoreUnavailable(
                    f"Entity store returned {response.status_code} for {method} {url}"
                ) from exc
            raise EntityStoreError(
                f"Entity store returned {response.status_code} for {method} {url}: {response.text}"
            ) from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise EntityStoreError(
                f"Entity store returned a non-JSON body for {method} {url}"
            ) from exc

    def list(self, entity_name, *, sort=None, limit=None, **filters):
        """
        List records of an entity

        Args:
            entity_name (str): The entity name, e.g. "Affiliate"
            sort (str): A field name to sort by, prefixed with "-" for descending order
            limit (int): The maximum number of records to return
            filters: Field values which the returned records must match

        Returns:
            list of dict: The matching records
        """
        params = dict(filters)
        if sort is not None:
            params["sort"] = sort
        if limit is not None:
            params["limit"] = limit
        return self._request("GET", self._entity_url(entity_name), params=params) or []

    def get(self, entity_name, entity_id):
        """
        Fetch a single record, or None if there is no record with that id
        """
        return self._request(
            "GET", self._entity_url(entity_name, entity_id), allow_not_found=True
        )

    def create(self, entity_name, data):
        """
        Create a record and return it as stored
        """
        return self._request("POST", self._entity_url(entity_name), json=data)

    def update(self, entity_name, entity_id, data):
        """
        Update some fields of a record and return it as stored
        """
        return self._request(
            "PUT", self._entity_url(entity_name, entity_id), json=data
        )

    def delete(self, entity_name, entity_id):
        """
        Delete a record
        """
        self._request("DELETE", self._entity_url(entity_name, entity_id))
