from django.test import TestCase
from rest_framework.test import APIRequestFactory

from permissions.roles import (
    CAP_CATALOG_EDIT,
    CAP_CATALOG_VIEW,
    CAP_POS_SELL,
    CAP_REPORTS_VIEW,
    HasAnyCapability,
    HasCapability,
    IsAdmin,
    IsCashier,
    IsStaff,
)
from users.models import User


class _View:
    def __init__(self, required_capability=None, required_any_capabilities=None):
        self.required_capability = required_capability
        self.required_any_capabilities = required_any_capabilities


class PermissionRoleTests(TestCase):
    """
    Tests for role-based permissions.

    GUARANTEES:
    - Admin reaches every screen
    - Cashier reaches POS and catalog reads only
    - Anonymous users denied everywhere
    """

    def setUp(self):
        self.factory = APIRequestFactory()

        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass",
            role="admin",
        )
        self.cashier = User.objects.create_user(
            email="cashier@example.com",
            password="pass",
            role="cashier",
        )

    # --------------------------------------------------
    # Helpers
    # --------------------------------------------------

    def _request_for(self, user=None):
        request = self.factory.get("/")
        request.user = user
        return request

    # --------------------------------------------------
    # ADMIN
    # --------------------------------------------------

    def test_admin_permissions(self):
        request = self._request_for(self.admin)

        self.assertTrue(IsAdmin().has_permission(request, None))
        self.assertTrue(IsStaff().has_permission(request, None))
        self.assertFalse(IsCashier().has_permission(request, None))

        self.assertTrue(HasCapability().has_permission(request, _View(CAP_REPORTS_VIEW)))
        self.assertTrue(HasCapability().has_permission(request, _View(CAP_CATALOG_EDIT)))

    # --------------------------------------------------
    # CASHIER
    # --------------------------------------------------

    def test_cashier_permissions(self):
        request = self._request_for(self.cashier)

        self.assertTrue(IsCashier().has_permission(request, None))
        self.assertTrue(IsStaff().has_permission(request, None))
        self.assertFalse(IsAdmin().has_permission(request, None))

        self.assertTrue(HasCapability().has_permission(request, _View(CAP_POS_SELL)))
        self.assertFalse(HasCapability().has_permission(request, _View(CAP_REPORTS_VIEW)))
        self.assertTrue(
            HasAnyCapability().has_permission(
                request,
                _View(required_any_capabilities={CAP_CATALOG_VIEW, CAP_CATALOG_EDIT}),
            )
        )

    def test_capability_permission_denies_when_view_declares_nothing(self):
        request = self._request_for(self.admin)

        self.assertFalse(HasCapability().has_permission(request, _View()))
        self.assertFalse(HasAnyCapability().has_permission(request, _View()))

    # --------------------------------------------------
    # ANONYMOUS
    # --------------------------------------------------

    def test_anonymous_user_denied_everywhere(self):
        request = self._request_for(None)

        self.assertFalse(IsAdmin().has_permission(request, None))
        self.assertFalse(IsCashier().has_permission(request, None))
        self.assertFalse(IsStaff().has_permission(request, None))
        self.assertFalse(HasCapability().has_permission(request, _View(CAP_POS_SELL)))
