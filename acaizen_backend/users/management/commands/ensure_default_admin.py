# users/management/commands/ensure_default_admin.py

"""
PATH: users/management/commands/ensure_default_admin.py

First-run account bootstrap.

- Creates the default admin (admin-1) ONLY when the database has no accounts.
- Idempotent: running it again does nothing.
- Does NOT print the password.
"""

from __future__ import annotations

from django.core.management.base import BaseCommand

from users.services.account_service import ensure_default_admin


class Command(BaseCommand):
    help = "Create the default admin account when no accounts exist (idempotent)."

    def handle(self, *args, **options):
        user, created = ensure_default_admin()

        if not created:
            self.stdout.write(self.style.WARNING("Accounts already exist. Skipping."))
            return

        self.stdout.write(self.style.SUCCESS(f"✔ Default admin created: {user.email}"))
