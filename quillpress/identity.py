"""
Identity store: account registration and credential checks.
"""
import logging

from django.contrib.auth.hashers import make_password
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

from .conf import quill_settings
from .models import Account, normalize_email

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "has already been taken"


def register(email, password):
    """
    Create an account.

    The email is normalized before it is validated, compared and stored.

    Raises:
        ValidationError: keyed by field, when the email is blank, malformed or
            already registered (case-insensitively), or the password is
            shorter than PASSWORD_MIN_LENGTH.
    """
    email = normalize_email(email)
    password = password or ""
    errors = {}

    if not email:
        errors["email"] = ["can't be blank"]
    else:
        try:
            validate_email(email)
        except ValidationError as exc:
            errors["email"] = exc.messages
        else:
            if Account.objects.filter(email__iexact=email).exists():
                errors["email"] = [EMAIL_TAKEN]

    min_length = quill_settings.PASSWORD_MIN_LENGTH
    if len(password) < min_length:
        errors["password"] = [f"is too short (minimum is {min_length} characters)"]

    if errors:
        raise ValidationError(errors)

    account = Account(email=email)
    account.set_password(password)
    try:
        with transaction.atomic():
            account.save()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same address.
        logger.warning("Concurrent registration rejected for %s", email)
        raise ValidationError({"email": [EMAIL_TAKEN]})

    logger.info("Registered account %s (id=%s)", email, account.pk)
    return account


def authenticate(email, password):
    """
    Return the account for these credentials, or None.

    Never distinguishes an unknown email from a wrong password.
    """
    email = normalize_email(email)
    account = Account.objects.filter(email=email).first() if email else None

    if account is None:
        # Hash anyway so an unknown email costs as much as a wrong password.
        make_password(password)
        logger.info("Authentication failed: unknown email")
        return None

    if not account.check_password(password):
        logger.info("Authentication failed for account id=%s", account.pk)
        return None

    return account


def get_account(account_id):
    """Return the account with this id, or None."""
    if account_id is None:
        return None
    return Account.objects.filter(pk=account_id).first()
