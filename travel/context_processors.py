# travel/context_processors.py

from .session import SessionState


def session_user(request):
    """Makes the signed-in API user available to every template as ``session_user``."""
    state = SessionState(request.session)
    return {
        'session_user': {
            'is_authenticated': state.is_authenticated,
            'username': state.username,
            'is_admin': state.is_admin,
        }
    }
