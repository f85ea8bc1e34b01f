from django.test import TestCase

from users.models import DEFAULT_ADMIN_ID, User
from users.services.account_service import (
    AccountNotFoundError,
    DuplicateEmailError,
    LastAdminError,
    SelfDeletionError,
    WrongPasswordError,
    authenticate_account,
    create_account,
    delete_account,
    ensure_default_admin,
    update_account,
)


class AccountServiceTests(TestCase):
    """
    GUARANTEES:
    - At least one admin always exists
    - An account cannot delete itself
    - Emails stay unique, blank password keeps the current one
    """

    def setUp(self):
        self.admin = create_account(
            email="admin@acaizen.test",
            password="Zen2024",
            name="Dona",
            role="admin",
        )

    # =====================================================
    # IDENTITY
    # =====================================================

    def test_new_accounts_get_distinct_string_ids(self):
        a = create_account(email="a@acaizen.test", password="x", name="A", role="cashier")
        b = create_account(email="b@acaizen.test", password="x", name="B", role="cashier")

        self.assertTrue(a.id.startswith("user-"))
        self.assertTrue(b.id.startswith("user-"))
        self.assertNotEqual(a.id, b.id)

    def test_password_is_kept_verbatim(self):
        self.assertEqual(User.objects.get(pk=self.admin.pk).password, "Zen2024")

    # =====================================================
    # LOGIN
    # =====================================================

    def test_authenticate_distinguishes_unknown_email_from_wrong_password(self):
        with self.assertRaises(AccountNotFoundError):
            authenticate_account(email="ghost@acaizen.test", password="Zen2024")

        with self.assertRaises(WrongPasswordError):
            authenticate_account(email="admin@acaizen.test", password="nope")

        user = authenticate_account(email="admin@acaizen.test", password="Zen2024")
        self.assertEqual(user.pk, self.admin.pk)

    # =====================================================
    # DELETE
    # =====================================================

    def test_deleting_sole_admin_fails(self):
        cashier = create_account(email="c@acaizen.test", password="x", name="C", role="cashier")

        with self.assertRaises(LastAdminError):
            delete_account(actor=cashier, account=self.admin)

        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_deleting_cashier_removes_exactly_that_record(self):
        cashier = create_account(email="c@acaizen.test", password="x", name="C", role="cashier")
        before = User.objects.count()

        delete_account(actor=self.admin, account=cashier)

        self.assertEqual(User.objects.count(), before - 1)
        self.assertFalse(User.objects.filter(pk=cashier.pk).exists())

    def test_deleting_second_admin_succeeds(self):
        second = create_account(email="b@acaizen.test", password="x", name="B", role="admin")

        delete_account(actor=self.admin, account=second)

        self.assertFalse(User.objects.filter(pk=second.pk).exists())
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_account_cannot_delete_itself(self):
        create_account(email="b@acaizen.test", password="x", name="B", role="admin")

        with self.assertRaises(SelfDeletionError):
            delete_account(actor=self.admin, account=self.admin)

    # =====================================================
    # UPDATE
    # =====================================================

    def test_duplicate_email_rejected_on_create_and_update(self):
        cashier = create_account(email="c@acaizen.test", password="x", name="C", role="cashier")

        with self.assertRaises(DuplicateEmailError):
            create_account(email="C@acaizen.test", password="x", name="X", role="cashier")

        with self.assertRaises(DuplicateEmailError):
            update_account(account=cashier, email="admin@acaizen.test")

    def test_blank_password_keeps_current(self):
        update_account(account=self.admin, name="Dona Zen", password="")

        refreshed = User.objects.get(pk=self.admin.pk)
        self.assertEqual(refreshed.password, "Zen2024")
        self.assertEqual(refreshed.name, "Dona Zen")

    def test_demoting_last_admin_fails(self):
        with self.assertRaises(LastAdminError):
            update_account(account=self.admin, role="cashier")

        self.assertEqual(User.objects.get(pk=self.admin.pk).role, "admin")

    # =====================================================
    # BOOTSTRAP
    # =====================================================

    def test_default_admin_only_created_on_empty_database(self):
        user, created = ensure_default_admin()
        self.assertFalse(created)
        self.assertIsNone(user)

        User.objects.all().delete()

        user, created = ensure_default_admin()
        self.assertTrue(created)
        self.assertEqual(user.id, DEFAULT_ADMIN_ID)
        self.assertEqual(user.email, "pdvzen1@gmail.com")
        self.assertEqual(user.role, "admin")
