"""Slug derivation shared by posts and categories."""
import re

from django.utils.text import slugify

_SEPARATORS = re.compile(r"[^a-z0-9]+")


def derive_slug(text, max_length=None):
    """
    Return the URL slug for a title or category name.

    Lower-cases, folds accents to ASCII, and collapses every run of
    non-alphanumeric characters into a single hyphen:

        >>> derive_slug("Rails & JavaScript: A Guide!")
        'rails-javascript-a-guide'

    Returns an empty string when nothing alphanumeric is left.
    """
    if not text:
        return ""
    slug = _SEPARATORS.sub("-", slugify(text)).strip("-")
    if max_length:
        slug = slug[:max_length].rstrip("-")
    return slug
