"""Django app configuration for quillpress."""
from django.apps import AppConfig


class QuillpressConfig(AppConfig):
    """Configuration for the quillpress app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "quillpress"
    verbose_name = "Quillpress"
