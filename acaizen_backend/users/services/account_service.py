"""
======================================================
PATH: users/services/account_service.py
======================================================
ACCOUNT SERVICE (staff accounts of the terminal)

Purpose:
- Login lookup that tells "unknown email" apart from "wrong password"
- Create / update / delete staff accounts
- Bootstrap the default admin on an empty database

Rules:
- Email is unique (compared case-insensitively).
- A blank password on update keeps the current one.
- At least one admin must always exist: deleting or demoting the last admin is rejected.
- The authenticated account cannot delete itself.
- Every rule is checked BEFORE any mutation.
"""

from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction

from permissions.roles import ROLE_ADMIN, ROLE_CHOICES
from users.models import DEFAULT_ADMIN_ID, User

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "pdvzen1@gmail.com"
DEFAULT_ADMIN_PASSWORD = "Zen2024"
DEFAULT_ADMIN_NAME = "Administrador"

VALID_ROLES = {value for value, _label in ROLE_CHOICES}


# =========================================================
# Errors
# =========================================================
class AccountError(Exception):
    code = "ACCOUNT_ERROR"


class AccountNotFoundError(AccountError):
    code = "USER_NOT_FOUND"


class WrongPasswordError(AccountError):
    code = "WRONG_PASSWORD"


class DuplicateEmailError(AccountError):
    code = "EMAIL_IN_USE"


class InvalidRoleError(AccountError):
    code = "INVALID_ROLE"


class LastAdminError(AccountError):
    code = "LAST_ADMIN"


class SelfDeletionError(AccountError):
    code = "SELF_DELETION"


# =========================================================
# Helpers
# =========================================================
def _normalize_email(email: str) -> str:
    return User.objects.normalize_email((email or "").strip())


def _email_taken(email: str, *, exclude_id: Optional[str] = None) -> bool:
    qs = User.objects.filter(email__iexact=email)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return qs.exists()


def _admin_count() -> int:
    return User.objects.filter(role=ROLE_ADMIN).count()


def _validate_role(role: str) -> None:
    if role not in VALID_ROLES:
        raise InvalidRoleError(f"Perfil inválido: {role}")


# =========================================================
# Authentication
# =========================================================
def authenticate_account(*, email: str, password: str) -> User:
    """
    Resolve an account by email and verify its plaintext password.

    Raises:
    - AccountNotFoundError: no account with that email
    - WrongPasswordError: account exists, password differs
    """
    user = User.objects.filter(email__iexact=_normalize_email(email)).first()
    if user is None:
        raise AccountNotFoundError("Usuário não encontrado")

    if not user.check_password(password):
        raise WrongPasswordError("Senha incorreta")

    return user


# =========================================================
# CRUD
# =========================================================
@transaction.atomic
def create_account(*, email: str, password: str, name: str, role: str) -> User:
    email = _normalize_email(email)
    _validate_role(role)

    if _email_taken(email):
        raise DuplicateEmailError("Este email já está em uso")

    user = User.objects.create_user(email=email, password=password, name=name, role=role)
    logger.info("Account created id=%s role=%s", user.id, user.role)
    return user


@transaction.atomic
def update_account(
    *,
    account: User,
    email: Optional[str] = None,
    password: Optional[str] = None,
    name: Optional[str] = None,
    role: Optional[str] = None,
) -> User:
    if email is not None:
        email = _normalize_email(email)
        if _email_taken(email, exclude_id=account.id):
            raise DuplicateEmailError("Este email já está em uso")

    if role is not None:
        _validate_role(role)
        demoting = account.role == ROLE_ADMIN and role != ROLE_ADMIN
        if demoting and _admin_count() <= 1:
            raise LastAdminError("Deve existir pelo menos um administrador")

    if email is not None:
        account.email = email
    if name is not None:
        account.name = name
    if role is not None:
        account.role = role
    if password:
        account.set_password(password)

    account.save()
    return account


@transaction.atomic
def delete_account(*, actor: User, account: User) -> None:
    if actor.pk == account.pk:
        raise SelfDeletionError("Você não pode excluir seu próprio usuário")

    if account.role == ROLE_ADMIN and _admin_count() <= 1:
        raise LastAdminError("Deve existir pelo menos um administrador")

    account_id = account.id
    account.delete()
    logger.info("Account deleted id=%s by=%s", account_id, actor.id)


# =========================================================
# Bootstrap
# =========================================================
def ensure_default_admin() -> tuple[Optional[User], bool]:
    """
    Create the default admin when no account exists at all.

    Returns (user, created). When accounts already exist nothing is touched
    and (None, False) is returned.
    """
    if User.objects.exists():
        return None, False

    user = User.objects.create_user(
        id=DEFAULT_ADMIN_ID,
        email=DEFAULT_ADMIN_EMAIL,
        password=DEFAULT_ADMIN_PASSWORD,
        name=DEFAULT_ADMIN_NAME,
        role=ROLE_ADMIN,
    )
    logger.info("Default admin created id=%s", user.id)
    return user, True
