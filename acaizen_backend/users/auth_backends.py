"""
PATH: users/auth_backends.py

AUTH BACKEND: email + plaintext password

Used by Django admin login and anything else that calls authenticate().
The API login view calls the account service directly so it can report
"unknown email" and "wrong password" separately.
"""

from __future__ import annotations

from django.contrib.auth.backends import BaseBackend

from users.models import User
from users.services.account_service import AccountError, authenticate_account


class EmailPlaintextBackend(BaseBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        """
        Django convention passes "username" as the identifier; DRF-style callers pass email=...
        """
        identifier = (username or kwargs.get("email") or "").strip()
        if not identifier or password is None:
            return None

        try:
            user = authenticate_account(email=identifier, password=password)
        except AccountError:
            return None

        if not user.is_active:
            return None

        return user

    def get_user(self, user_id):
        try:
            return User.objects.get(pk=user_id)
        except User.DoesNotExist:
            return None
