"""Create the default categories listed in QUILLPRESS['SEED_CATEGORIES']."""
from django.core.management.base import BaseCommand

from quillpress import store


class Command(BaseCommand):
    help = "Create any missing default categories. Safe to run repeatedly."

    def add_arguments(self, parser):
        parser.add_argument(
            "names",
            nargs="*",
            help="Category names to ensure instead of the configured defaults",
        )

    def handle(self, *args, **options):
        created = store.seed_categories(options["names"] or None)
        for category in created:
            self.stdout.write(f"Created category {category.name}")
        self.stdout.write(self.style.SUCCESS(f"{len(created)} categories created"))
