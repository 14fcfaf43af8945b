"""
Content store: validated persistence and lookups for posts and categories.

Every lookup that serves an owner-only page goes through
find_owned_by_slug(), so a post belonging to someone else is reported
exactly like a post that does not exist.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.http import Http404

from .conf import quill_settings
from .models import Category, Post
from .slugs import derive_slug

logger = logging.getLogger(__name__)

POST_FIELDS = ("title", "content", "excerpt", "featured_image_url", "is_published")
SLUG_TAKEN = "has already been taken"

# Slugs that would be shadowed by fixed routes under /posts.
RESERVED_SLUGS = frozenset({"new"})


# Posts


def create_post(owner, fields):
    """
    Validate and insert a new post owned by owner.

    fields may hold any of POST_FIELDS plus ``categories`` (an iterable of
    Category instances).

    Raises:
        ValidationError: keyed by field name.
    """
    post = Post(owner=owner)
    categories = _apply_fields(post, fields)
    post.slug = derive_slug(post.title, quill_settings.SLUG_MAX_LENGTH)
    _validate(post)

    _save(post, categories)
    logger.info("Created post %r (id=%s) for account id=%s", post.slug, post.pk, owner.pk)
    return post


def update_post(post, fields):
    """
    Apply a partial update to post and persist it.

    Only keys present in fields change. A new title re-derives the slug. On
    failure the database row is untouched and the instance is reloaded.

    Raises:
        ValidationError: keyed by field name.
    """
    old_title = post.title
    categories = _apply_fields(post, fields)
    if post.title != old_title:
        post.slug = derive_slug(post.title, quill_settings.SLUG_MAX_LENGTH)

    try:
        _validate(post)
        _save(post, categories)
    except ValidationError:
        post.refresh_from_db()
        raise

    logger.info("Updated post %r (id=%s)", post.slug, post.pk)
    return post


def list_published(limit=None):
    """Return the newest published, active posts, at most limit of them."""
    if limit is None:
        limit = quill_settings.HOME_POST_LIMIT
    return list(
        Post.objects.published()
        .select_related("owner")
        .prefetch_related("categories")
        .order_by("-created_at", "-id")[:limit]
    )


def list_owned(owner, include_discarded=False):
    """
    Return owner's posts, newest first.

    Categories for all posts are fetched in one extra query.
    """
    posts = Post.objects.owned_by(owner)
    if not include_discarded:
        posts = posts.active()
    return list(posts.prefetch_related("categories").order_by("-created_at", "-id"))


def find_published_by_slug(slug):
    """
    Return the published, active post with this slug.

    Raises:
        Http404: for drafts, discarded posts and unknown slugs alike.
    """
    post = Post.objects.published().filter(slug=slug).first()
    if post is None:
        raise Http404("Post not found")
    return post


def find_owned_by_slug(owner, slug, include_discarded=False):
    """
    Return owner's post with this slug.

    With include_discarded, the most recently discarded match wins over an
    active one, so a slug reused after a discard still reaches the old post.

    Raises:
        Http404: when owner has no such post, whether or not another account
            does.
    """
    posts = Post.objects.owned_by(owner).filter(slug=slug)
    if include_discarded:
        posts = posts.order_by(F("discarded_at").desc(nulls_last=True), "-id")
    else:
        posts = posts.active()
    post = posts.first()
    if post is None:
        raise Http404("Post not found")
    return post


# Categories


def list_categories():
    return list(Category.objects.order_by("name"))


def find_category(pk):
    category = Category.objects.filter(pk=pk).first()
    if category is None:
        raise Http404("Category not found")
    return category


def create_category(name):
    """
    Create a category; its slug is derived from name.

    Raises:
        ValidationError: when name is blank or taken.
    """
    name = (name or "").strip()
    category = Category(
        name=name,
        slug=derive_slug(name, quill_settings.SLUG_MAX_LENGTH),
    )
    errors = {}
    try:
        category.full_clean(exclude=["slug"], validate_unique=False)
    except ValidationError as exc:
        errors = exc.message_dict

    if "name" not in errors:
        if not category.slug:
            errors["name"] = ["must contain letters or numbers"]
        elif Category.objects.filter(Q(slug=category.slug) | Q(name__iexact=name)).exists():
            errors["name"] = [SLUG_TAKEN]

    if errors:
        raise ValidationError(errors)

    try:
        with transaction.atomic():
            category.save()
    except IntegrityError:
        logger.warning("Concurrent category creation rejected for %r", name)
        raise ValidationError({"name": [SLUG_TAKEN]})

    logger.info("Created category %r (id=%s)", category.name, category.pk)
    return category


def delete_category(category):
    """Delete a category. Posts stay; only their links to it go."""
    pk, name = category.pk, category.name
    category.delete()
    logger.info("Deleted category %r (id=%s)", name, pk)


def seed_categories(names=None):
    """
    Ensure a category exists for each name. Safe to run repeatedly.

    Returns:
        The categories created by this call.
    """
    if names is None:
        names = quill_settings.SEED_CATEGORIES
    created = []
    for name in names:
        slug = derive_slug(name, quill_settings.SLUG_MAX_LENGTH)
        category, was_created = Category.objects.get_or_create(
            name=name,
            defaults={"slug": slug},
        )
        if was_created:
            created.append(category)
    return created


# Helpers


def _apply_fields(post, fields):
    """Copy fields onto post; return the new category list, or None if unchanged."""
    fields = dict(fields)
    categories = fields.pop("categories", None)
    unknown = set(fields) - set(POST_FIELDS)
    if unknown:
        raise TypeError(f"Unknown post fields: {', '.join(sorted(unknown))}")

    for name, value in fields.items():
        if name == "is_published":
            value = bool(value)
        elif value is None:
            value = ""
        setattr(post, name, value)

    if categories is not None:
        categories = list(categories)
    return categories


def _validate(post):
    """
    Run field validation plus the slug checks the model cannot express.

    Slug problems are reported against the title, the field the author
    actually typed.
    """
    errors = {}
    try:
        post.full_clean(exclude=["slug", "owner"], validate_constraints=False)
    except ValidationError as exc:
        errors = exc.message_dict

    if "title" not in errors:
        if not post.slug:
            errors["title"] = ["must contain letters or numbers"]
        elif post.slug in RESERVED_SLUGS:
            errors["title"] = ["is reserved"]
        elif post.discarded_at is None and _slug_in_use(post.slug, exclude_pk=post.pk):
            errors["title"] = [SLUG_TAKEN]

    if errors:
        raise ValidationError(errors)


def _slug_in_use(slug, exclude_pk=None):
    """Return True if an active post other than exclude_pk holds slug."""
    return Post.objects.active().filter(slug=slug).exclude(pk=exclude_pk).exists()


def _save(post, categories):
    try:
        with transaction.atomic():
            post.save()
            if categories is not None:
                post.categories.set(categories)
    except IntegrityError:
        # Another writer claimed the slug between the check and the insert.
        logger.warning("Slug conflict while saving post %r", post.slug)
        raise ValidationError({"title": [SLUG_TAKEN]})
