"""
Shared fixtures: fake API responses and signed-in sessions.
"""

import json

import pytest
import requests


@pytest.fixture
def make_response():
    def _make(status=200, body=None, raw=None, url='https://api.test/api/'):
        response = requests.Response()
        response.status_code = status
        response.reason = 'OK' if status < 400 else 'Error'
        response.url = url
        response.encoding = 'utf-8'
        if raw is not None:
            response._content = raw
        else:
            response._content = b'' if body is None else json.dumps(body).encode('utf-8')
        return response
    return _make


def _sign_in(client, is_admin=False, username='alice'):
    session = client.session
    session['Token'] = 'token-123'
    session['Username'] = username
    session['IsAdmin'] = is_admin
    session.save()
    return session


@pytest.fixture
def signed_in_client(client):
    _sign_in(client)
    return client


@pytest.fixture
def admin_client(client):
    _sign_in(client, is_admin=True, username='admin')
    return client
