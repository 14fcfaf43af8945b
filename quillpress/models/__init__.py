"""
Models for django-quillpress.

All models are importable from quillpress.models:

    from quillpress.models import Account, Post, Category, PostCategory
"""
from .accounts import Account, normalize_email
from .posts import Category, Post, PostCategory, PostQuerySet

__all__ = [
    # Accounts
    "Account",
    "normalize_email",
    # Posts
    "Category",
    "Post",
    "PostCategory",
    "PostQuerySet",
]
