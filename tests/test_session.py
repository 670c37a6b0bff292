from datetime import timedelta

from django.utils import timezone

from travel.models import TokenResponse
from travel.session import SessionState


def test_empty_session_is_anonymous():
    state = SessionState({})
    assert not state.is_authenticated
    assert not state.is_admin
    assert state.token is None


def test_store_and_clear():
    session = {}
    state = SessionState(session)
    state.store(TokenResponse(token='abc', username='ann', is_admin=True,
                              expires_at=timezone.now() + timedelta(hours=1)))

    assert state.is_authenticated
    assert state.is_admin
    assert state.username == 'ann'

    state.clear()
    assert session == {}
    assert not state.is_authenticated


def test_expired_token_is_not_authenticated():
    state = SessionState({})
    state.store(TokenResponse(token='abc', username='ann', expires_at=timezone.now() - timedelta(minutes=1)))
    assert state.token == 'abc'
    assert state.is_expired
    assert not state.is_authenticated


def test_admin_flag_requires_authentication():
    assert not SessionState({'IsAdmin': True}).is_admin
