"""
Forms for django-quillpress.

The forms only parse and coerce submitted values. Length, format and
uniqueness rules live on the models and in the content store; their
ValidationErrors are attached back onto the form with add_store_errors().
"""
from django import forms
from django.core.exceptions import NON_FIELD_ERRORS

from .models import Category


class StoreErrorsMixin:
    """Attach a store ValidationError's per-field messages to the form."""

    def add_store_errors(self, exc):
        for field, messages in exc.message_dict.items():
            if field == NON_FIELD_ERRORS or field not in self.fields:
                field = None
            self.add_error(field, messages)


class LoginForm(forms.Form):
    email = forms.CharField(required=False)
    password = forms.CharField(required=False, strip=False, widget=forms.PasswordInput)


class PostForm(StoreErrorsMixin, forms.Form):
    """
    Create/edit form for posts.

    The template pairs the published checkbox with a hidden ``false`` value
    and the category checkboxes with a hidden empty value, so unchecking
    everything is still submitted.
    """

    title = forms.CharField(required=False)
    content = forms.CharField(required=False, strip=False, widget=forms.Textarea)
    excerpt = forms.CharField(required=False, widget=forms.Textarea)
    featured_image_url = forms.CharField(required=False, label="Featured image URL")
    is_published = forms.BooleanField(required=False, label="Published")
    category_ids = forms.ModelMultipleChoiceField(
        queryset=Category.objects.all(),
        required=False,
        widget=forms.CheckboxSelectMultiple,
        label="Categories",
    )

    STORE_FIELDS = ("title", "content", "excerpt", "featured_image_url", "is_published")

    def __init__(self, data=None, *args, instance=None, **kwargs):
        if data is not None:
            data = data.copy()
            if "category_ids" in data:
                data.setlist("category_ids", [v for v in data.getlist("category_ids") if v])
        if instance is not None and data is None:
            kwargs.setdefault("initial", {
                "title": instance.title,
                "content": instance.content,
                "excerpt": instance.excerpt,
                "featured_image_url": instance.featured_image_url,
                "is_published": instance.is_published,
                "category_ids": list(instance.categories.values_list("pk", flat=True)),
            })
        self.instance = instance
        super().__init__(data, *args, **kwargs)

    def to_fields(self, partial=False):
        """
        Return cleaned values in the shape the content store takes.

        With partial, fields absent from the submission are left out so an
        update only touches what was sent.
        """
        fields = {}
        for name in self.STORE_FIELDS:
            if partial and name not in self.data:
                continue
            fields[name] = self.cleaned_data.get(name)
        if not partial or "category_ids" in self.data:
            fields["categories"] = list(self.cleaned_data.get("category_ids") or [])
        return fields


class CategoryForm(StoreErrorsMixin, forms.Form):
    name = forms.CharField(required=False)
