from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase

from authentication.domain.exceptions import Forbidden, Unauthenticated
from authentication.domain.services.user_service import UserService
from marketplace.services.base import ErrorCodes
from marketplace.tests.factories import AdminFactory, UserFactory
from utils.rbac import ROLE_ADMIN, ROLE_SELLER, check_role, require_role, resolve_role

User = get_user_model()


class UserServiceTest(TestCase):
    def setUp(self):
        self.service = UserService()

    def test_upsert_creates_user(self):
        result = self.service.upsert_user("new@example.com", name="New", role="seller")

        self.assertTrue(result.ok)
        user = User.objects.get(email="new@example.com")
        self.assertEqual(result.value.upserted_id, str(user.id))
        self.assertEqual(user.role, "seller")
        self.assertEqual(user.name, "New")

    def test_upsert_defaults_to_buyer(self):
        self.service.upsert_user("plain@example.com")

        self.assertEqual(User.objects.get(email="plain@example.com").role, "buyer")

    def test_upsert_updates_existing_user(self):
        user = UserFactory(name="Old")

        result = self.service.upsert_user(user.email, name="New")
        unchanged = self.service.upsert_user(user.email, name="New")

        self.assertEqual((result.value.matched_count, result.value.modified_count), (1, 1))
        self.assertEqual(unchanged.value.modified_count, 0)
        self.assertEqual(User.objects.filter(email=user.email).count(), 1)

    def test_admin_role_cannot_be_self_assigned(self):
        result = self.service.upsert_user("sneaky@example.com", role="admin")

        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)
        self.assertFalse(User.objects.filter(email="sneaky@example.com").exists())

    def test_admin_keeps_role_on_upsert(self):
        admin = AdminFactory()

        self.service.upsert_user(admin.email, role="buyer")

        admin.refresh_from_db()
        self.assertEqual(admin.role, "admin")

    def test_get_role(self):
        admin = AdminFactory()

        self.assertEqual(
            self.service.get_role(admin.email).value,
            {"role": "admin", "isAdmin": True, "isSeller": False, "isBuyer": False},
        )
        self.assertEqual(self.service.get_role("ghost@example.com").value["role"], None)

    def test_role_checks_read_the_stored_role(self):
        user = UserFactory()
        stale = User.objects.get(id=user.id)
        User.objects.filter(id=user.id).update(role="admin")

        self.assertEqual(resolve_role(stale), ROLE_ADMIN)
        self.assertTrue(check_role(stale, [ROLE_ADMIN]).ok)

    def test_get_by_email(self):
        user = UserFactory()

        self.assertEqual(self.service.get_by_email(user.email).value, user)
        self.assertEqual(self.service.get_by_email("ghost@example.com").error, ErrorCodes.USER_NOT_FOUND)


class RequireRoleTest(TestCase):
    def test_require_role(self):
        with self.assertRaises(Unauthenticated):
            require_role(AnonymousUser(), [ROLE_SELLER])
        with self.assertRaises(Forbidden):
            require_role(UserFactory(), [ROLE_SELLER])
        require_role(AdminFactory(), [ROLE_ADMIN])
