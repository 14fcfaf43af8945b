"""
Login session lifecycle on top of django.contrib.sessions.

A session moves between three states:

    ANONYMOUS --login--> AUTHENTICATED --expiry--> EXPIRED (flushed, anonymous)
        ^                      |
        +-------logout---------+

Expiry is absolute: it is fixed at login and never extended by activity.
The stored session and its cookie are kept for SESSION_GRACE_PERIOD beyond
that deadline, so validate() still sees the expired login and can report it.
Both login and logout throw away the whole session, key included, so a key
seen before either transition can never be used afterwards.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .conf import quill_settings

logger = logging.getLogger(__name__)

ACCOUNT_KEY = "quillpress_account_id"
EXPIRES_KEY = "quillpress_expires_at"


class SessionStatus(enum.Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    EXPIRED = "expired"


@dataclass(frozen=True)
class SessionState:
    """Result of validating a session at the start of a request."""

    status: SessionStatus
    account_id: int | None = None
    expires_at: datetime | None = None

    @property
    def is_authenticated(self):
        return self.status is SessionStatus.AUTHENTICATED

    @property
    def is_expired(self):
        return self.status is SessionStatus.EXPIRED


ANONYMOUS = SessionState(SessionStatus.ANONYMOUS)


def login(session, account, now=None):
    """
    Attach account to a freshly generated session.

    Any data and key held by the session beforehand are destroyed first.

    Returns:
        The new session key.
    """
    now = now or timezone.now()
    expires_at = now + quill_settings.SESSION_LIFETIME

    session.flush()
    session[ACCOUNT_KEY] = account.pk
    session[EXPIRES_KEY] = expires_at.isoformat()
    session.set_expiry(expires_at + quill_settings.SESSION_GRACE_PERIOD)
    session.save()

    logger.info("Account id=%s logged in, session expires %s", account.pk, expires_at)
    return session.session_key


def validate(session, now=None):
    """
    Return the SessionState of session at instant now.

    An expired session is flushed as a side effect; the caller should treat
    the rest of the request as anonymous.
    """
    account_id = session.get(ACCOUNT_KEY)
    if account_id is None:
        return ANONYMOUS

    now = now or timezone.now()
    expires_at = _parse_expiry(session.get(EXPIRES_KEY))
    if expires_at is None or now >= expires_at:
        session.flush()
        logger.info("Session for account id=%s expired at %s", account_id, expires_at)
        return SessionState(SessionStatus.EXPIRED, expires_at=expires_at)

    return SessionState(
        SessionStatus.AUTHENTICATED,
        account_id=account_id,
        expires_at=expires_at,
    )


def logout(session):
    """Discard every key of the session, not just the account pointer."""
    account_id = session.get(ACCOUNT_KEY)
    session.flush()
    if account_id is not None:
        logger.info("Account id=%s logged out", account_id)


def _parse_expiry(value):
    if not isinstance(value, str):
        return None
    try:
        expires_at = parse_datetime(value)
    except ValueError:
        return None
    if expires_at is not None and timezone.is_naive(expires_at):
        expires_at = timezone.make_aware(expires_at, dt_timezone.utc)
    return expires_at
