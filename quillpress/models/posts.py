"""
Post, Category, and PostCategory models for django-quillpress.
"""
from django.core.validators import (
    MaxLengthValidator,
    MinLengthValidator,
    URLValidator,
)
from django.db import models
from django.db.models import Q
from django.urls import reverse
from django.utils import timezone

from ..conf import quill_settings


class Category(models.Model):
    """
    Flat category shared by every author.

    The slug is derived from the name by the content store.
    """

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=quill_settings.SLUG_MAX_LENGTH, unique=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Categories"

    def __str__(self):
        return self.name

    @property
    def post_count(self):
        """Return count of published, active posts in this category."""
        return self.posts.published().count()


class PostQuerySet(models.QuerySet):
    """Lifecycle filters for posts."""

    def active(self):
        return self.filter(discarded_at__isnull=True)

    def discarded(self):
        return self.filter(discarded_at__isnull=False)

    def published(self):
        """Published and not discarded: the only posts the public may read."""
        return self.active().filter(is_published=True)

    def owned_by(self, owner):
        return self.filter(owner=owner)


class Post(models.Model):
    """
    Blog post.

    Lifecycle is tracked by two independent columns: ``is_published`` and
    ``discarded_at``. A discarded post keeps its published flag so that
    restoring it returns it to exactly the state it was discarded from.
    """

    title = models.CharField(max_length=200, validators=[MinLengthValidator(3)])
    slug = models.SlugField(max_length=quill_settings.SLUG_MAX_LENGTH, db_index=True)
    content = models.TextField(
        validators=[MinLengthValidator(10), MaxLengthValidator(1_000_000)],
    )
    excerpt = models.CharField(max_length=500, blank=True)
    featured_image_url = models.CharField(
        max_length=2048,
        blank=True,
        validators=[
            URLValidator(
                schemes=["http", "https"],
                message="Must be a valid HTTP or HTTPS URL.",
            ),
        ],
    )

    owner = models.ForeignKey(
        "quillpress.Account",
        on_delete=models.CASCADE,
        related_name="posts",
    )

    # Status
    is_published = models.BooleanField(default=False)
    discarded_at = models.DateTimeField(null=True, blank=True, db_index=True)

    # Taxonomy
    categories = models.ManyToManyField(
        Category,
        through="PostCategory",
        related_name="posts",
        blank=True,
    )

    # Engagement stats
    views_count = models.PositiveBigIntegerField(default=0)

    # Timestamps
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PostQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["slug"],
                condition=Q(discarded_at__isnull=True),
                name="quillpress_post_active_slug_unique",
            ),
        ]
        indexes = [
            models.Index(fields=["owner", "-created_at"]),
            models.Index(
                fields=["is_published"],
                condition=Q(discarded_at__isnull=True),
                name="quillpress_post_pub_active_idx",
            ),
        ]

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        return reverse("quillpress:post_detail", kwargs={"slug": self.slug})

    @property
    def is_discarded(self):
        return self.discarded_at is not None

    @property
    def preview(self):
        """Return the excerpt, or truncated content for list display."""
        if self.excerpt:
            return self.excerpt
        if len(self.content) > 280:
            return self.content[:280] + "..."
        return self.content

    def discard(self, now=None):
        """Soft delete the post. The published flag is left as it is."""
        self.discarded_at = now or timezone.now()
        self.save(update_fields=["discarded_at", "updated_at"])

    def undiscard(self):
        """Clear the discarded timestamp."""
        self.discarded_at = None
        self.save(update_fields=["discarded_at", "updated_at"])


class PostCategory(models.Model):
    """
    Junction table linking posts to categories.

    Rows are removed with either side.
    """

    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name="post_categories",
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        related_name="post_categories",
    )

    class Meta:
        verbose_name = "Post Category"
        verbose_name_plural = "Post Categories"
        constraints = [
            models.UniqueConstraint(
                fields=["post", "category"],
                name="quillpress_postcategory_unique_pair",
            ),
        ]

    def __str__(self):
        return f"{self.post} - {self.category}"
