"""
Account model for django-quillpress.
"""
from django.contrib.auth.hashers import check_password, make_password
from django.db import models
from django.db.models.functions import Lower


def normalize_email(email):
    """Return the canonical form of an email address: trimmed and lower-cased."""
    return (email or "").strip().lower()


class Account(models.Model):
    """
    Author account.

    Identified by email, which is always stored normalized. The password
    column only ever holds a hash produced by Django's password hashers.
    """

    email = models.EmailField(max_length=254, unique=True)
    password = models.CharField(max_length=128)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["email"]
        constraints = [
            models.UniqueConstraint(
                Lower("email"),
                name="quillpress_account_email_ci_unique",
            ),
        ]

    def __str__(self):
        return self.email

    def save(self, *args, **kwargs):
        self.email = normalize_email(self.email)
        super().save(*args, **kwargs)

    def set_password(self, raw_password):
        """Hash and store raw_password. Does not save the account."""
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        """
        Return True if raw_password matches the stored hash.

        Rehashes transparently when the hasher configuration has changed.
        """

        def setter(raw):
            self.set_password(raw)
            self.save(update_fields=["password"])

        return check_password(raw_password, self.password, setter)
