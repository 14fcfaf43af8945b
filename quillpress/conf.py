"""
Configuration settings for django-quillpress.

Override these in your Django settings.py:

    QUILLPRESS = {
        'SESSION_LIFETIME': timedelta(days=7),
        'HOME_POST_LIMIT': 20,
        ...
    }

PUBLIC_ROUTES lists (HTTP method, namespaced view name) pairs that may be
reached without logging in. Every other route served by quillpress requires an
authenticated session.
"""
from datetime import timedelta

from django.conf import settings

DEFAULTS = {
    # Sessions
    "SESSION_LIFETIME": timedelta(weeks=2),
    # How long the stored session outlives SESSION_LIFETIME, so an expired
    # login can still be recognised and reported.
    "SESSION_GRACE_PERIOD": timedelta(days=1),
    "LOGIN_URL": "quillpress:login",
    "LOGIN_REDIRECT_URL": "quillpress:admin",
    "LOGOUT_REDIRECT_URL": "quillpress:home",

    # Accounts
    "PASSWORD_MIN_LENGTH": 6,

    # Access gate
    "PUBLIC_ROUTES": [
        ("GET", "quillpress:home"),
        ("GET", "quillpress:login"),
        ("POST", "quillpress:session_create"),
        ("DELETE", "quillpress:logout"),
        ("POST", "quillpress:logout"),
        ("GET", "quillpress:post_detail"),
    ],

    # Posts
    "HOME_POST_LIMIT": 10,
    "SLUG_MAX_LENGTH": 255,

    # Seed data
    "SEED_CATEGORIES": [
        "General",
        "JavaScript",
        "Rails",
        "Language Learning",
        "3D & Graphics",
    ],
}


class QuillpressSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from quillpress.conf import quill_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid quillpress setting: {name}")

        user_settings = getattr(settings, "QUILLPRESS", {})
        return user_settings.get(name, DEFAULTS[name])

    @property
    def PUBLIC_ROUTES(self):
        """Return public routes as a set of (METHOD, view_name) tuples."""
        user_settings = getattr(settings, "QUILLPRESS", {})
        routes = user_settings.get("PUBLIC_ROUTES", DEFAULTS["PUBLIC_ROUTES"])
        return {(method.upper(), name) for method, name in routes}


quill_settings = QuillpressSettings()
