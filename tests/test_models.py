"""
Tests for django-quillpress models.
"""
import pytest
from django.db import IntegrityError, transaction
from django.utils import timezone

from quillpress.models import Account, Category, Post, PostCategory
from quillpress.slugs import derive_slug


def make_post(owner, slug, **kwargs):
    """Insert a post directly, bypassing the content store."""
    kwargs.setdefault("title", slug.replace("-", " ").title())
    kwargs.setdefault("content", "Some content for the post.")
    return Post.objects.create(owner=owner, slug=slug, **kwargs)


class TestSlugs:
    """Tests for slug derivation."""

    @pytest.mark.parametrize("text, expected", [
        ("Rails & JavaScript: A Guide!", "rails-javascript-a-guide"),
        ("Rails    Best   Practices", "rails-best-practices"),
        ("Hello World", "hello-world"),
        ("--Hello--World--", "hello-world"),
        ("snake_case title", "snake-case-title"),
        ("Top 10 Tips", "top-10-tips"),
        ("Café déjà vu", "cafe-deja-vu"),
        ("3D & Graphics", "3d-graphics"),
    ])
    def test_derive_slug(self, text, expected):
        assert derive_slug(text) == expected

    @pytest.mark.parametrize("text", ["", None, "!!!", "   ", "&&&"])
    def test_nothing_alphanumeric_gives_empty_slug(self, text):
        assert derive_slug(text) == ""

    def test_slug_is_lowercase_without_whitespace(self):
        slug = derive_slug("  Mixed CASE\tand\nwhitespace  ")
        assert slug == slug.lower()
        assert not any(ch.isspace() for ch in slug)

    def test_max_length_does_not_leave_trailing_hyphen(self):
        slug = derive_slug("abcd efgh", max_length=5)
        assert slug == "abcd"


class TestAccount:
    """Tests for Account model."""

    def test_email_normalized_on_save(self, db):
        """Test email is trimmed and lower-cased before persistence."""
        account = Account(email="  Mixed@Example.COM ")
        account.set_password("secret1")
        account.save()

        account.refresh_from_db()
        assert account.email == "mixed@example.com"

    def test_password_is_hashed(self, db):
        """Test the plaintext never reaches the password column."""
        account = Account(email="hash@example.com")
        account.set_password("secret1")
        account.save()

        assert account.password != "secret1"
        assert account.check_password("secret1")
        assert not account.check_password("secret2")

    def test_email_unique_ignores_case_in_database(self, db):
        """Test the Lower(email) constraint catches rows that skipped save()."""
        Account.objects.create(email="dup@example.com", password="x")
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Account.objects.bulk_create([Account(email="DUP@example.com", password="x")])

    def test_deleting_account_removes_its_posts(self, account):
        make_post(account, "hello")
        account.delete()
        assert Post.objects.count() == 0


class TestPost:
    """Tests for Post model."""

    def test_defaults(self, account):
        """Test a new post starts as an unviewed draft."""
        post = make_post(account, "hello")
        assert post.is_published is False
        assert post.views_count == 0
        assert post.discarded_at is None
        assert not post.is_discarded

    def test_get_absolute_url(self, account):
        post = make_post(account, "hello-world")
        assert post.get_absolute_url() == "/posts/hello-world"

    def test_preview(self, account):
        """Test preview prefers the excerpt and truncates content."""
        long_post = make_post(account, "long", content="x" * 500)
        assert len(long_post.preview) == 283  # 280 + "..."

        excerpted = make_post(account, "excerpted", excerpt="Short summary")
        assert excerpted.preview == "Short summary"

    def test_active_slug_unique_in_database(self, account, other_account):
        """Test two active posts cannot share a slug, even across owners."""
        make_post(account, "hello")
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                make_post(other_account, "hello")

    def test_discarded_slug_can_be_reused(self, account):
        """Test the slug constraint only covers rows that are not discarded."""
        old = make_post(account, "hello")
        old.discard()

        new = make_post(account, "hello")
        assert new.pk != old.pk
        assert Post.objects.filter(slug="hello").count() == 2

    def test_discard_and_undiscard(self, account):
        post = make_post(account, "hello", is_published=True)
        moment = timezone.now()

        post.discard(now=moment)
        post.refresh_from_db()
        assert post.discarded_at == moment
        assert post.is_published

        post.undiscard()
        post.refresh_from_db()
        assert post.discarded_at is None


class TestPostQuerySet:
    """Tests for the lifecycle filters."""

    @pytest.fixture
    def posts(self, account):
        draft = make_post(account, "draft")
        published = make_post(account, "published", is_published=True)
        gone_draft = make_post(account, "gone-draft")
        gone_draft.discard()
        gone_published = make_post(account, "gone-published", is_published=True)
        gone_published.discard()
        return draft, published, gone_draft, gone_published

    def test_active(self, posts):
        draft, published, _, _ = posts
        assert set(Post.objects.active()) == {draft, published}

    def test_discarded(self, posts):
        _, _, gone_draft, gone_published = posts
        assert set(Post.objects.discarded()) == {gone_draft, gone_published}

    def test_published_excludes_drafts_and_discarded(self, posts):
        _, published, _, _ = posts
        assert list(Post.objects.published()) == [published]

    def test_owned_by(self, posts, other_account):
        theirs = make_post(other_account, "theirs")
        assert theirs not in Post.objects.owned_by(posts[0].owner)
        assert list(Post.objects.owned_by(other_account)) == [theirs]


class TestCategory:
    """Tests for Category and PostCategory models."""

    def test_post_count_only_counts_visible_posts(self, account, category):
        visible = make_post(account, "visible", is_published=True)
        draft = make_post(account, "draft")
        gone = make_post(account, "gone", is_published=True)
        gone.discard()
        for post in (visible, draft, gone):
            post.categories.add(category)

        assert category.post_count == 1

    def test_pair_is_unique(self, account, category):
        post = make_post(account, "hello")
        PostCategory.objects.create(post=post, category=category)
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                PostCategory.objects.create(post=post, category=category)

    def test_deleting_category_keeps_posts(self, account, category):
        """Test removal cascades to the join rows only."""
        post = make_post(account, "hello")
        post.categories.add(category)

        category.delete()

        assert Post.objects.filter(pk=post.pk).exists()
        assert PostCategory.objects.count() == 0
        assert Category.objects.count() == 0

    def test_deleting_post_removes_join_rows(self, account, category):
        post = make_post(account, "hello")
        post.categories.add(category)

        post.delete()

        assert PostCategory.objects.count() == 0
        assert Category.objects.filter(pk=category.pk).exists()
