# travel/decorators.py

from functools import wraps
from urllib.parse import urlencode

from django.conf import settings
from django.contrib import messages
from django.http import HttpResponseForbidden
from django.shortcuts import redirect, resolve_url

from .session import SessionState


def redirect_to_login(request):
    login_url = resolve_url(settings.LOGIN_URL)
    return redirect(f"{login_url}?{urlencode({'next': request.get_full_path()})}")


def session_login_required(view_func):
    """Sends anonymous visitors to the login page, keeping the requested URL in ?next=."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not SessionState(request.session).is_authenticated:
            return redirect_to_login(request)
        return view_func(request, *args, **kwargs)
    return _wrapped


def admin_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        state = SessionState(request.session)
        if not state.is_authenticated:
            messages.info(request, "Please log in with an administrator account.")
            return redirect_to_login(request)
        if not state.is_admin:
            return HttpResponseForbidden("Administrator access is required for this page.")
        return view_func(request, *args, **kwargs)
    return _wrapped
