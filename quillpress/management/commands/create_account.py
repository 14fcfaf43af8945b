"""
Register an author account from the console.

    python manage.py create_account author@example.com
    python manage.py create_account author@example.com --password s3cret!
"""
import getpass

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from quillpress import identity


class Command(BaseCommand):
    help = "Create an author account. Prompts for the password unless --password is given."

    def add_arguments(self, parser):
        parser.add_argument("email")
        parser.add_argument("--password", help="Plaintext password (prompted for if omitted)")

    def handle(self, *args, **options):
        password = options["password"]
        if password is None:
            password = getpass.getpass("Password: ")
            if password != getpass.getpass("Password (again): "):
                raise CommandError("Passwords do not match.")

        try:
            account = identity.register(options["email"], password)
        except ValidationError as exc:
            problems = "; ".join(
                f"{field} {message}"
                for field, messages in exc.message_dict.items()
                for message in messages
            )
            raise CommandError(f"Could not create account: {problems}")

        self.stdout.write(self.style.SUCCESS(f"Created account {account.email}"))
