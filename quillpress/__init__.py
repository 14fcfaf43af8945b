"""
django-quillpress - A small single-author-per-post blogging app for Django.

Features:
- Email/password accounts with hashed passwords
- Absolute-expiry login sessions with fixation protection
- Per-route public/protected access gate
- Draft / published / discarded post lifecycle scoped to the owner
- Categories shared across all authors
- Atomic view counting
"""

__version__ = "0.1.0"
