"""
PATH: users/models/user.py

USER ACCOUNT MODEL

Rules:
- Identity is a string: "admin-1" for the bootstrap admin, "user-<epoch-ms>" for everyone else.
- Email is the login identifier (unique).
- Password is stored and compared in PLAINTEXT. This is a known weakness carried
  on purpose so backups stay compatible with the existing terminal data; it is not hardened.
- Role is either "admin" or "cashier". Django admin access follows the admin role.
"""

from __future__ import annotations

import threading
import time

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.db import models
from django.utils import timezone

from permissions.roles import ROLE_ADMIN, ROLE_CASHIER, ROLE_CHOICES

DEFAULT_ADMIN_ID = "admin-1"

_id_lock = threading.Lock()
_last_issued_ms = 0


def generate_user_id() -> str:
    """
    "user-<epoch-ms>", strictly increasing within the process so two accounts
    created in the same millisecond never collide.
    """
    global _last_issued_ms

    with _id_lock:
        now_ms = int(time.time() * 1000)
        if now_ms <= _last_issued_ms:
            now_ms = _last_issued_ms + 1
        _last_issued_ms = now_ms

    return f"user-{now_ms}"


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("User must have an email")

        extra_fields.setdefault("role", ROLE_CASHIER)
        extra_fields.setdefault("name", "")

        user = self.model(email=self.normalize_email(email).strip(), **extra_fields)
        user.set_password(password or "")
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields["role"] = ROLE_ADMIN
        return self.create_user(email=email, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser):
    id = models.CharField(
        max_length=64,
        primary_key=True,
        default=generate_user_id,
        editable=False,
    )

    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, blank=True, default="")

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CASHIER)

    # default (not auto_now_add) so backup restore can keep original timestamps
    created_at = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        ordering = ["created_at"]

    # -------------------------------------------------
    # Plaintext credentials
    # -------------------------------------------------
    def set_password(self, raw_password):
        self.password = raw_password or ""

    def check_password(self, raw_password):
        return raw_password is not None and raw_password == self.password

    # -------------------------------------------------
    # Role helpers (Django admin compatibility)
    # -------------------------------------------------
    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_staff(self) -> bool:
        return self.is_admin

    @property
    def is_superuser(self) -> bool:
        return self.is_admin

    def has_perm(self, perm, obj=None) -> bool:
        return self.is_active and self.is_admin

    def has_module_perms(self, app_label) -> bool:
        return self.is_active and self.is_admin

    def __str__(self):
        return f"{self.email} ({self.role})"
