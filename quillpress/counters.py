"""View counting for public post reads."""
from django.db.models import F

from .models import Post


def increment(post_id):
    """
    Add one to a post's view count.

    Runs as a single UPDATE evaluated by the database, so concurrent readers
    never overwrite each other's increments.
    """
    Post.objects.filter(pk=post_id).update(views_count=F("views_count") + 1)
