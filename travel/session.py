# travel/session.py

from django.utils import timezone
from django.utils.dateparse import parse_datetime

# Keys used in request.session
TOKEN_KEY = 'Token'
USERNAME_KEY = 'Username'
IS_ADMIN_KEY = 'IsAdmin'
EXPIRES_AT_KEY = 'ExpiresAt'


class SessionState:
    """
    Authentication state of one browser session.

    Wraps the request's session store so handlers receive an explicit object
    instead of reaching into the session themselves.
    """

    def __init__(self, session):
        self.session = session

    @property
    def token(self):
        return self.session.get(TOKEN_KEY) or None

    @property
    def username(self):
        return self.session.get(USERNAME_KEY) or ''

    @property
    def is_admin(self):
        return self.is_authenticated and bool(self.session.get(IS_ADMIN_KEY, False))

    @property
    def expires_at(self):
        raw = self.session.get(EXPIRES_AT_KEY)
        if not raw:
            return None
        return parse_datetime(raw)

    @property
    def is_expired(self):
        expires_at = self.expires_at
        return expires_at is not None and expires_at <= timezone.now()

    @property
    def is_authenticated(self):
        return bool(self.token) and not self.is_expired

    def store(self, token_response):
        self.session[TOKEN_KEY] = token_response.token
        self.session[USERNAME_KEY] = token_response.username
        self.session[IS_ADMIN_KEY] = bool(token_response.is_admin)
        if token_response.expires_at is not None:
            self.session[EXPIRES_AT_KEY] = token_response.expires_at.isoformat()
        else:
            self.session.pop(EXPIRES_AT_KEY, None)

    def clear(self):
        for key in (TOKEN_KEY, USERNAME_KEY, IS_ADMIN_KEY, EXPIRES_AT_KEY):
            self.session.pop(key, None)
