# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
ROLE_ADMIN = "admin"
ROLE_CASHIER = "cashier"

ROLE_CHOICES = [
    (ROLE_ADMIN, "Administrador"),
    (ROLE_CASHIER, "Vendedor"),
]

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_CASHIER,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views should protect capabilities, not raw roles.
CAP_POS_SELL = "pos.sell"

CAP_CATALOG_VIEW = "catalog.view"
CAP_CATALOG_EDIT = "catalog.edit"

CAP_REPORTS_VIEW = "reports.view"

CAP_USERS_MANAGE = "users.manage"
CAP_SETTINGS_MANAGE = "settings.manage"

ALL_CAPABILITIES = {
    CAP_POS_SELL,
    CAP_CATALOG_VIEW,
    CAP_CATALOG_EDIT,
    CAP_REPORTS_VIEW,
    CAP_USERS_MANAGE,
    CAP_SETTINGS_MANAGE,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_CASHIER: {
        CAP_POS_SELL,
        # cashier needs the catalog to sell, but never edits it
        CAP_CATALOG_VIEW,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def effective_capabilities_for(user) -> set[str]:
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


# =========================================================
# Base Role Permission (Internal Use)
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Base permission for role-based access control.

    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        user_role = get_user_role(user)
        if not user_role:
            return False

        return user_role in self.allowed_roles


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_REPORTS_VIEW
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # If not set, deny-by-default to avoid accidental open endpoints
            return False

        return required in effective_capabilities_for(user)


class HasAnyCapability(BasePermission):
    """
    Require ANY capability from a list.

    Usage:
        view.required_any_capabilities = {CAP_CATALOG_VIEW, CAP_CATALOG_EDIT}
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_any_capabilities", None)
        if not required:
            return False

        caps = effective_capabilities_for(user)
        return any(cap in caps for cap in set(required))


# =========================================================
# Role Permissions
# =========================================================
class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}


class IsCashier(BaseRolePermission):
    allowed_roles = {ROLE_CASHIER}


class IsStaff(BaseRolePermission):
    """Anyone allowed to operate the POS terminal."""

    allowed_roles = STAFF_ROLES
