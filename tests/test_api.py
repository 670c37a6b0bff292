from unittest.mock import patch

import pytest
import requests

from travel.api import ApiClient
from travel.exceptions import ApiError


def test_bearer_token_is_attached_when_present():
    assert ApiClient('https://api.test/api/', token='abc').http.headers['Authorization'] == 'Bearer abc'
    assert 'Authorization' not in ApiClient('https://api.test/api/').http.headers


def test_endpoints_are_joined_onto_base_url():
    client = ApiClient('https://api.test/api')
    assert client.url_for('Trip') == 'https://api.test/api/Trip'
    assert client.url_for('/Trip/3/guides') == 'https://api.test/api/Trip/3/guides'


def test_get_json_resolves_references(make_response):
    client = ApiClient('https://api.test/api/', timeout=5)
    body = {'$id': '1', '$values': [{'$id': '2', 'id': 1, 'name': 'Paris'}]}
    with patch.object(client.http, 'request', return_value=make_response(200, body)) as request:
        data = client.get_json('Destination')

    assert data == [{'id': 1, 'name': 'Paris'}]
    request.assert_called_once_with(
        'GET', 'https://api.test/api/Destination', json=None, timeout=5, verify=True
    )


def test_get_json_raises_with_status_code(make_response):
    client = ApiClient('https://api.test/api/')
    with patch.object(client.http, 'request', return_value=make_response(503)):
        with pytest.raises(ApiError) as excinfo:
            client.get_json('Trip')
    assert excinfo.value.status_code == 503
    assert '503' in str(excinfo.value)


def test_invalid_json_raises_api_error(make_response):
    client = ApiClient('https://api.test/api/')
    with patch.object(client.http, 'request', return_value=make_response(200, raw=b'<html>oops</html>')):
        with pytest.raises(ApiError, match='Invalid response'):
            client.get_json('Trip')


def test_empty_body_decodes_to_none(make_response):
    client = ApiClient('https://api.test/api/')
    with patch.object(client.http, 'request', return_value=make_response(204)):
        assert client.get_json('Trip') is None


def test_transport_errors_become_api_errors():
    client = ApiClient('https://api.test/api/')
    with patch.object(client.http, 'request', side_effect=requests.ConnectionError('refused')):
        with pytest.raises(ApiError, match='Could not reach the API') as excinfo:
            client.post('auth/login', {'username': 'x'})
    assert excinfo.value.status_code is None


def test_close_releases_the_connection_pool():
    client = ApiClient('https://api.test/api/')
    with patch.object(client.http, 'close') as close:
        with client as entered:
            assert entered is client
    close.assert_called_once_with()
