from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from authentication.domain.services.token_service import issue_token
from infrastructure.container import container
from marketplace.models import Booking, Product, ReportedProduct
from marketplace.tests.factories import AdminFactory, CategoryFactory, ProductFactory, SellerFactory, UserFactory


class APITestCase(TestCase):
    def setUp(self):
        container.reset()
        self.client = APIClient()

    def login(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(user.email)}")


class GateTest(APITestCase):
    def test_missing_credential_is_401(self):
        response = self.client.get(reverse("marketplace:booking-list"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_invalid_credential_is_403(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")

        response = self.client.get(reverse("marketplace:booking-list"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_wrong_role_is_403(self):
        self.login(UserFactory())

        response = self.client.get(reverse("marketplace:admin-sellers"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class CatalogAPITest(APITestCase):
    def setUp(self):
        super().setUp()
        self.seller = SellerFactory(name="Sam")
        self.category = CategoryFactory(id="c1", name="Phones")

    def test_list_categories(self):
        response = self.client.get(reverse("marketplace:category-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]["id"], "c1")

    def test_retrieve_category(self):
        found = self.client.get(reverse("marketplace:category-detail", kwargs={"pk": "c1"}))
        missing = self.client.get(reverse("marketplace:category-detail", kwargs={"pk": "nope"}))

        self.assertEqual(found.data["name"], "Phones")
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)

    def test_category_products_plain_and_enriched(self):
        ProductFactory(seller_email=self.seller.email, category=self.category)
        url = reverse("marketplace:category-products", kwargs={"pk": "c1"})

        plain = self.client.get(url)
        enriched = self.client.get(url, {"enriched": "1"})

        self.assertEqual(plain.data[0]["seller_email"], self.seller.email)
        self.assertNotIn("seller_email", enriched.data[0])
        self.assertEqual(enriched.data[0]["seller_name"], "Sam")

    def test_seller_creates_product(self):
        self.login(self.seller)

        response = self.client.post(
            reverse("marketplace:product-list"),
            {"name": "Phone", "category_id": "c1", "resale_price": "99.00", "condition": "good"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(Product.objects.filter(id=response.data["insertedId"]).exists())

    def test_buyer_cannot_create_product(self):
        self.login(UserFactory())

        response = self.client.post(
            reverse("marketplace:product-list"),
            {"name": "Phone", "category_id": "c1", "resale_price": "99.00"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"]["code"], "forbidden")
        self.assertFalse(Product.objects.exists())

    def test_create_product_validation_error(self):
        self.login(self.seller)

        response = self.client.post(reverse("marketplace:product-list"), {"name": "No price"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_advertise_and_list_advertised(self):
        product = ProductFactory(seller_email=self.seller.email, category=self.category)
        self.login(self.seller)

        response = self.client.patch(reverse("marketplace:product-advertise", kwargs={"pk": product.id}))
        listing = self.client.get(reverse("marketplace:product-advertised"))

        self.assertEqual(response.data["modifiedCount"], 1)
        self.assertEqual([item["id"] for item in listing.data], [str(product.id)])

    def test_my_products(self):
        ProductFactory(seller_email=self.seller.email, category=self.category)
        ProductFactory(category=self.category)
        self.login(self.seller)

        response = self.client.get(reverse("marketplace:product-mine"))

        self.assertEqual(len(response.data), 1)

    def test_delete_product(self):
        product = ProductFactory(seller_email=self.seller.email, category=self.category)
        self.login(self.seller)

        response = self.client.delete(reverse("marketplace:product-detail", kwargs={"pk": product.id}))

        self.assertEqual(response.data["deletedCount"], 1)
        self.assertFalse(Product.objects.filter(id=product.id).exists())


class BookingAPITest(APITestCase):
    def setUp(self):
        super().setUp()
        self.seller = SellerFactory()
        self.product = ProductFactory(seller_email=self.seller.email)
        self.alice = UserFactory(name="Alice")
        self.bob = UserFactory(name="Bob")

    def reserve(self, user, product_id=None):
        self.login(user)
        return self.client.post(
            reverse("marketplace:booking-list"),
            {"product_id": str(product_id or self.product.id), "booker_location": "Dhaka", "booker_number": "0170"},
            format="json",
        )

    def test_reserve_uses_caller_identity(self):
        response = self.reserve(self.alice)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        booking = Booking.objects.get(product_id=self.product.id)
        entry = booking.bookers.get()
        self.assertEqual(entry.booker_email, self.alice.email)
        self.assertEqual(entry.booker_name, "Alice")

    def test_buyer_listing_is_private(self):
        self.reserve(self.alice)
        self.reserve(self.bob)

        self.login(self.alice)
        response = self.client.get(reverse("marketplace:booking-list"))

        self.assertEqual(len(response.data), 1)
        self.assertEqual([b["booker_email"] for b in response.data[0]["bookers"]], [self.alice.email])

    def test_seller_listing_shows_all_bookers(self):
        self.reserve(self.alice)
        self.reserve(self.bob)

        self.login(self.seller)
        response = self.client.get(reverse("marketplace:booking-seller"))

        self.assertEqual(len(response.data[0]["bookers"]), 2)

    def test_retrieve_booking(self):
        self.reserve(self.alice)
        booking = Booking.objects.get(product_id=self.product.id)

        response = self.client.get(reverse("marketplace:booking-detail", kwargs={"pk": booking.id}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["state"], "booked")

    def test_unreserve(self):
        self.reserve(self.alice)

        response = self.client.delete(reverse("marketplace:booking-mine", kwargs={"pk": self.product.id}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Booking.objects.filter(product_id=self.product.id).exists())

    def test_reserve_missing_product_is_404(self):
        product_id = self.product.id
        self.product.delete()

        response = self.reserve(self.alice, product_id)

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ModerationAPITest(APITestCase):
    def setUp(self):
        super().setUp()
        self.admin = AdminFactory()
        self.seller = SellerFactory()
        self.buyer = UserFactory()
        self.product = ProductFactory(seller_email=self.seller.email)

    def test_report_and_review(self):
        self.login(self.buyer)
        created = self.client.post(reverse("marketplace:reports"), {"product_id": str(self.product.id)}, format="json")
        denied = self.client.get(reverse("marketplace:reports"))

        self.login(self.admin)
        listing = self.client.get(reverse("marketplace:reports"))

        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertEqual(denied.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(listing.data[0]["product"]["id"], str(self.product.id))
        self.assertEqual(ReportedProduct.objects.count(), 1)

    def test_admin_lists_and_verifies_sellers(self):
        self.login(self.admin)

        sellers = self.client.get(reverse("marketplace:admin-sellers"))
        buyers = self.client.get(reverse("marketplace:admin-buyers"))
        verified = self.client.patch(reverse("marketplace:admin-verify-seller", kwargs={"seller_id": self.seller.id}))

        self.assertIn(self.seller.email, [user["email"] for user in sellers.data])
        self.assertEqual([user["email"] for user in buyers.data], [self.buyer.email])
        self.assertEqual(verified.data["modifiedCount"], 1)

    def test_admin_removes_accounts(self):
        self.login(self.admin)

        removed_buyer = self.client.delete(reverse("marketplace:admin-remove-buyer", kwargs={"user_id": self.buyer.id}))
        removed_seller = self.client.delete(
            reverse("marketplace:admin-remove-seller", kwargs={"email": self.seller.email})
        )

        self.assertEqual(removed_buyer.data["deletedCount"], 1)
        self.assertEqual(removed_seller.data["deletedCount"], 1)
        self.assertFalse(Product.objects.filter(id=self.product.id).exists())

    def test_remove_buyer_route_refuses_a_seller(self):
        self.login(self.admin)

        response = self.client.delete(reverse("marketplace:admin-remove-buyer", kwargs={"user_id": self.seller.id}))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Product.objects.filter(id=self.product.id).exists())


class EndToEndSaleTest(APITestCase):
    """A seller lists a phone, two buyers book it, one pays, and it is gone from the catalog."""

    def test_full_sale(self):
        seller = SellerFactory()
        buyer_a = UserFactory()
        buyer_b = UserFactory()
        CategoryFactory(id="c1", name="Phones")

        self.login(seller)
        created = self.client.post(
            reverse("marketplace:product-list"),
            {"name": "Phone X", "category_id": "c1", "resale_price": "250.00"},
            format="json",
        )
        product_id = created.data["insertedId"]
        self.client.patch(reverse("marketplace:product-advertise", kwargs={"pk": product_id}))

        for buyer in (buyer_a, buyer_b):
            self.login(buyer)
            self.client.post(reverse("marketplace:booking-list"), {"product_id": product_id}, format="json")
        booking = Booking.objects.get(product_id=product_id)
        self.assertEqual(booking.bookers.count(), 2)

        self.login(buyer_a)
        intent = self.client.post(reverse("payment_system:create_payment_intent"), {"price": "250.00"}, format="json")
        self.assertEqual(intent.data["amount"], 25000)
        paid = self.client.post(
            reverse("payment_system:record_payment"),
            {"product_id": product_id, "booking_id": booking.id, "transaction_id": intent.data["intent_id"]},
            format="json",
        )
        self.assertEqual(paid.status_code, status.HTTP_201_CREATED)

        self.assertFalse(Product.objects.filter(id=product_id).exists())
        self.assertEqual(self.client.get(reverse("marketplace:product-advertised")).data, [])
        booking.refresh_from_db()
        self.assertTrue(booking.is_paid)
        self.assertEqual(booking.bought_by, buyer_a.email)
        self.assertEqual(booking.price, Decimal("250.00"))

        again = self.client.post(
            reverse("payment_system:record_payment"),
            {"product_id": product_id, "booking_id": booking.id, "transaction_id": intent.data["intent_id"]},
            format="json",
        )
        self.assertEqual(again.status_code, status.HTTP_409_CONFLICT)

        self.login(buyer_b)
        late = self.client.post(reverse("marketplace:booking-list"), {"product_id": product_id}, format="json")
        self.assertEqual(late.status_code, status.HTTP_409_CONFLICT)
