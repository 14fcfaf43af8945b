"""
Shared fixtures for django-quillpress tests.
"""
from urllib.parse import urlencode

import pytest

from quillpress import identity, store

PASSWORD = "password123"


@pytest.fixture
def account(db):
    """Create the primary test author."""
    return identity.register("test@example.com", PASSWORD)


@pytest.fixture
def other_account(db):
    """Create a second author who owns nothing of the first."""
    return identity.register("other@example.com", PASSWORD)


@pytest.fixture
def category(db):
    """Create a test category."""
    return store.create_category("Technology")


@pytest.fixture
def published_post(account):
    """Create a published post owned by account."""
    return store.create_post(account, {
        "title": "Test Post",
        "content": "Test content here",
        "is_published": True,
    })


@pytest.fixture
def draft_post(account):
    """Create a draft post owned by account."""
    return store.create_post(account, {
        "title": "Draft Post",
        "content": "Draft content",
    })


@pytest.fixture
def login(client):
    """Return a function that logs the test client in as an account."""

    def _login(as_account, password=PASSWORD):
        response = client.post("/sessions", {"email": as_account.email, "password": password})
        assert response.status_code == 302
        # Land on the dashboard so the login notice is shown and cleared.
        assert client.get(response.url).status_code == 200
        return client

    return _login


@pytest.fixture
def author_client(login, account):
    """Test client logged in as account."""
    return login(account)


def form_body(data):
    """Encode data the way a browser submits a form, for PATCH/DELETE requests."""
    return {
        "data": urlencode(data, doseq=True),
        "content_type": "application/x-www-form-urlencoded",
    }
