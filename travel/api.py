# travel/api.py
"""
Thin HTTP client for the backend API.

Every request goes to ``<base_url><endpoint>`` and carries the bearer token of
the current session when there is one. Transport failures are logged and
re-raised as ApiError so callers only deal with one exception type.
"""

import logging
from urllib.parse import urljoin

import requests

from .exceptions import ApiError
from .serialization import resolve_references

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class ApiClient:

    def __init__(self, base_url, token=None, timeout=DEFAULT_TIMEOUT, verify=True, session=None):
        # urljoin drops the last path segment unless the base ends with '/'
        self.base_url = base_url if base_url.endswith('/') else base_url + '/'
        self.token = token
        self.timeout = timeout
        self.verify = verify
        self.http = session or requests.Session()
        self.http.headers.update({
            'Accept': 'application/json',
            'Content-Type': 'application/json',
        })
        if token:
            self.http.headers['Authorization'] = f"Bearer {token}"

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def url_for(self, endpoint):
        return urljoin(self.base_url, endpoint.lstrip('/'))

    def request(self, method, endpoint, payload=None):
        url = self.url_for(endpoint)
        try:
            return self.http.request(
                method,
                url,
                json=payload,
                timeout=self.timeout,
                verify=self.verify,
            )
        except requests.RequestException as e:
            logger.error("Error performing %s request to %s", method, endpoint, exc_info=True)
            raise ApiError(f"Could not reach the API ({method} {endpoint}): {e}") from e

    def get(self, endpoint):
        return self.request('GET', endpoint)

    def post(self, endpoint, payload=None):
        return self.request('POST', endpoint, payload)

    def put(self, endpoint, payload=None):
        return self.request('PUT', endpoint, payload)

    def delete(self, endpoint):
        return self.request('DELETE', endpoint)

    def get_json(self, endpoint):
        """GET ``endpoint`` and return its decoded body, raising ApiError on any failure."""
        response = self.get(endpoint)
        if not response.ok:
            raise ApiError(
                f"GET {endpoint} failed with status {response.status_code} ({response.reason})",
                status_code=response.status_code,
            )
        return decode_json(response, endpoint)


def decode_json(response, endpoint):
    if not response.content:
        return None
    try:
        return resolve_references(response.json())
    except ValueError as e:
        # requests' JSONDecodeError and SerializationError are both ValueErrors
        logger.error("Invalid JSON received from %s: %s", endpoint, e)
        raise ApiError(f"Invalid response from {endpoint}: {e}", status_code=response.status_code) from e
