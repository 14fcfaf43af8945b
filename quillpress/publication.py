"""
Post lifecycle transitions, always scoped to the acting owner.

Reachable states, as (is_published, discarded_at is set):

    DRAFT                     (False, False)
    PUBLISHED                 (True,  False)
    DISCARDED_FROM_DRAFT      (False, True)
    DISCARDED_FROM_PUBLISHED  (True,  True)

Draft and published switch through an ordinary update of the published flag.
Discarding keeps the flag, so restoring lands back on the state the post
was discarded from. Nothing is terminal.
"""
import enum
import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from . import store
from .models import Post

logger = logging.getLogger(__name__)


class PostState(enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    DISCARDED_FROM_DRAFT = "discarded_from_draft"
    DISCARDED_FROM_PUBLISHED = "discarded_from_published"

    @property
    def is_discarded(self):
        return self in (PostState.DISCARDED_FROM_DRAFT, PostState.DISCARDED_FROM_PUBLISHED)

    @property
    def is_public(self):
        return self is PostState.PUBLISHED


def state_of(post):
    """Return the PostState encoded by post's two lifecycle columns."""
    if post.discarded_at is not None:
        if post.is_published:
            return PostState.DISCARDED_FROM_PUBLISHED
        return PostState.DISCARDED_FROM_DRAFT
    if post.is_published:
        return PostState.PUBLISHED
    return PostState.DRAFT


def set_published(owner, slug, published):
    """Move owner's active post between draft and published."""
    post = store.find_owned_by_slug(owner, slug)
    return store.update_post(post, {"is_published": published})


def discard(owner, slug, now=None):
    """
    Soft delete owner's active post.

    Raises:
        Http404: if owner has no active post with this slug.
    """
    post = store.find_owned_by_slug(owner, slug)
    previous = state_of(post)
    post.discard(now=now)
    logger.info("Post %r (id=%s) discarded from %s", post.slug, post.pk, previous.value)
    return post


def restore(owner, slug):
    """
    Undo a discard of owner's post.

    Restoring a post that is not discarded changes nothing.

    Raises:
        Http404: if owner has no post with this slug.
        ValidationError: if another active post has taken the slug meanwhile.
    """
    post = store.find_owned_by_slug(owner, slug, include_discarded=True)
    if post.discarded_at is None:
        return post

    if Post.objects.active().filter(slug=post.slug).exists():
        raise ValidationError({"title": [store.SLUG_TAKEN]})

    discarded_at = post.discarded_at
    try:
        with transaction.atomic():
            post.undiscard()
    except IntegrityError:
        post.discarded_at = discarded_at
        logger.warning("Slug conflict while restoring post %r", post.slug)
        raise ValidationError({"title": [store.SLUG_TAKEN]})

    logger.info("Post %r (id=%s) restored to %s", post.slug, post.pk, state_of(post).value)
    return post
