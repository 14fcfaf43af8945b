"""
Access gate for quillpress.

Add after the session and message middleware:

    MIDDLEWARE = [
        ...
        'django.contrib.sessions.middleware.SessionMiddleware',
        'django.contrib.messages.middleware.MessageMiddleware',
        'quillpress.middleware.AccessGateMiddleware',
    ]

Public access is declared per route, as (HTTP method, namespaced view name)
pairs in the PUBLIC_ROUTES setting, rather than by path prefix. GET
/posts/<slug> is public; GET /posts/new and POST /posts are not, although all
three live under /posts. HEAD is admitted wherever GET is.
"""
import logging
from dataclasses import dataclass

from django.contrib import messages
from django.http import QueryDict
from django.shortcuts import redirect
from django.urls import Resolver404, resolve

from . import sessions
from .conf import quill_settings
from .identity import get_account
from .models import Account

logger = logging.getLogger(__name__)

OVERRIDABLE_METHODS = ("PATCH", "PUT", "DELETE")
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please login again."


@dataclass(frozen=True)
class RequestContext:
    """
    Per-request identity, built once by the gate and read by the views.

    Available as ``request.quill``.
    """

    session_state: sessions.SessionState
    account: Account | None = None

    @property
    def is_authenticated(self):
        return self.account is not None

    @property
    def session_expired(self):
        return self.session_state.is_expired


def effective_method(request):
    """
    Return the HTTP method a request stands for.

    HTML forms can only POST; a ``_method`` field of PATCH, PUT or DELETE
    turns such a POST into that method.
    """
    method = request.method.upper()
    if method == "POST":
        override = request.POST.get("_method", "").upper()
        if override in OVERRIDABLE_METHODS:
            return override
    return method


def form_data(request):
    """
    Return the submitted form fields for POST, PATCH, PUT and DELETE alike.

    Call before any method override is applied to the request.
    """
    if request.method == "POST":
        return request.POST
    if request.content_type == "application/x-www-form-urlencoded":
        return QueryDict(request.body, encoding=request.encoding)
    return QueryDict()


def is_public(path, method="GET", urlconf=None):
    """
    Return True if method on path may be served without logging in.

    Paths that do not resolve are let through so they end in a plain 404.
    """
    try:
        match = resolve(path, urlconf=urlconf)
    except Resolver404:
        return True
    method = "GET" if method.upper() == "HEAD" else method.upper()
    return (method, match.view_name) in quill_settings.PUBLIC_ROUTES


def guard(path, method, session_state, urlconf=None):
    """
    Decide whether a request may proceed.

    Returns:
        None to let it through, or a redirect to the login page.
    """
    if session_state.is_authenticated or is_public(path, method, urlconf):
        return None
    return redirect(quill_settings.LOGIN_URL)


class AccessGateMiddleware:
    """
    Validate the session, bind RequestContext, and enforce login.

    An expired session is flushed and reported once through the messages
    framework; the request then continues as anonymous.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        state = sessions.validate(request.session)
        account = None
        if state.is_authenticated:
            account = get_account(state.account_id)
            if account is None:
                logger.warning("Session references missing account id=%s", state.account_id)
                sessions.logout(request.session)
                state = sessions.ANONYMOUS
        elif state.is_expired:
            messages.warning(request, SESSION_EXPIRED_MESSAGE)

        request.quill = RequestContext(session_state=state, account=account)

        response = guard(
            request.path_info,
            effective_method(request),
            state,
            urlconf=getattr(request, "urlconf", None),
        )
        if response is not None:
            logger.debug("Redirecting anonymous %s %s to login", request.method, request.path)
            return response
        return self.get_response(request)
