from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.tests.factories import SellerFactory

User = get_user_model()


class UserAPITest(TestCase):
    def setUp(self):
        container.reset()
        self.client = APIClient()

    def test_upsert_then_token_then_role(self):
        created = self.client.post(
            reverse("user-upsert"), {"email": "sara@example.com", "name": "Sara", "role": "seller"}, format="json"
        )
        updated = self.client.post(reverse("user-upsert"), {"email": "sara@example.com", "name": "Sara"}, format="json")
        token = self.client.post(reverse("issue-token"), {"email": "sara@example.com"}, format="json")

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.data['token']}")
        role = self.client.get(reverse("user-role", kwargs={"email": "sara@example.com"}))

        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertIn("upsertedId", created.data)
        self.assertEqual(updated.data["matchedCount"], 1)
        self.assertEqual(role.data["role"], "seller")
        self.assertTrue(role.data["isSeller"])

    def test_upsert_rejects_admin_role(self):
        response = self.client.post(reverse("user-upsert"), {"email": "x@example.com", "role": "admin"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(User.objects.filter(email="x@example.com").exists())

    def test_token_for_unknown_email(self):
        response = self.client.post(reverse("issue-token"), {"email": "ghost@example.com"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["token"], "")

    def test_role_lookup_requires_credential(self):
        seller = SellerFactory()

        response = self.client.get(reverse("user-role", kwargs={"email": seller.email}))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
