from decimal import Decimal

from django.contrib.auth.models import AnonymousUser
from django.test import TestCase

from marketplace.booking.domain.services.booking_service import BookingService
from marketplace.catalog.domain.services.catalog_service import CatalogService
from marketplace.models import BookerEntry, Booking, Product, ReportedProduct
from marketplace.services.base import ErrorCodes
from marketplace.tests.factories import (
    AdminFactory,
    CategoryFactory,
    ProductFactory,
    ReportedProductFactory,
    SellerFactory,
    UserFactory,
)


class CatalogServiceTest(TestCase):
    def setUp(self):
        self.service = CatalogService()
        self.seller = SellerFactory(name="Sam Seller", is_verified=True)
        self.buyer = UserFactory()
        self.admin = AdminFactory()
        self.category = CategoryFactory(id="c1", name="Furniture")

    def _product_data(self, **overrides):
        data = {
            "name": "Oak table",
            "description": "Solid oak, seats six",
            "category_id": "c1",
            "resale_price": Decimal("120.00"),
            "original_price": Decimal("400.00"),
            "condition": "good",
            "years_of_use": 3,
        }
        data.update(overrides)
        return data

    def test_create_product_as_seller(self):
        result = self.service.create_product(self.seller, self._product_data())

        self.assertTrue(result.ok)
        product = Product.objects.get(id=result.value.inserted_id)
        self.assertEqual(product.seller_email, self.seller.email)
        self.assertEqual(product.category_id, "c1")
        self.assertFalse(product.is_advertised)

    def test_create_product_as_buyer_is_forbidden(self):
        result = self.service.create_product(self.buyer, self._product_data())

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.FORBIDDEN)
        self.assertEqual(Product.objects.count(), 0)

    def test_create_product_unauthenticated(self):
        result = self.service.create_product(AnonymousUser(), self._product_data())

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.UNAUTHENTICATED)

    def test_create_product_normalizes_category_name(self):
        result = self.service.create_product(self.seller, self._product_data(category_id="furniture"))

        self.assertTrue(result.ok)
        self.assertEqual(Product.objects.get(id=result.value.inserted_id).category_id, "c1")

    def test_create_product_unknown_category(self):
        result = self.service.create_product(self.seller, self._product_data(category_id="nope"))

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.CATEGORY_NOT_FOUND)

    def test_create_product_requires_price(self):
        data = self._product_data()
        del data["resale_price"]

        result = self.service.create_product(self.seller, data)

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)

    def test_list_advertised_only_returns_flagged_products(self):
        advertised = ProductFactory(seller_email=self.seller.email, category=self.category, is_advertised=True)
        ProductFactory(seller_email=self.seller.email, category=self.category, is_advertised=False)

        result = self.service.list_advertised()

        self.assertTrue(result.ok)
        self.assertEqual([p.id for p in result.value], [advertised.id])

    def test_enriched_listing_hides_seller_email(self):
        ProductFactory(seller_email=self.seller.email, category=self.category, is_advertised=True)

        result = self.service.list_advertised(enriched=True)

        self.assertTrue(result.ok)
        entry = result.value[0]
        self.assertNotIn("seller_email", entry)
        self.assertEqual(entry["seller_name"], "Sam Seller")
        self.assertTrue(entry["seller_verified"])

    def test_list_by_category_unknown_is_empty(self):
        ProductFactory(category=self.category)

        result = self.service.list_by_category("missing")

        self.assertTrue(result.ok)
        self.assertEqual(result.value, [])

    def test_list_by_seller(self):
        mine = ProductFactory(seller_email=self.seller.email, category=self.category)
        ProductFactory(category=self.category)

        result = self.service.list_by_seller(self.seller.email)

        self.assertEqual([p.id for p in result.value], [mine.id])

    def test_set_advertised_is_idempotent(self):
        product = ProductFactory(seller_email=self.seller.email, category=self.category)

        first = self.service.set_advertised(product.id, self.seller)
        second = self.service.set_advertised(product.id, self.seller)

        self.assertEqual((first.value.matched_count, first.value.modified_count), (1, 1))
        self.assertEqual((second.value.matched_count, second.value.modified_count), (1, 0))
        product.refresh_from_db()
        self.assertTrue(product.is_advertised)

    def test_set_advertised_missing_product_matches_nothing(self):
        product = ProductFactory(seller_email=self.seller.email, category=self.category)
        product_id = product.id
        product.delete()

        result = self.service.set_advertised(product_id, self.seller)

        self.assertTrue(result.ok)
        self.assertEqual(result.value.matched_count, 0)
        self.assertFalse(Product.objects.filter(id=product_id).exists())

    def test_set_advertised_by_other_seller_is_forbidden(self):
        product = ProductFactory(seller_email=self.seller.email, category=self.category)

        result = self.service.set_advertised(product.id, SellerFactory())

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.FORBIDDEN)

    def test_admin_can_delete_any_product_with_reports(self):
        product = ProductFactory(seller_email=self.seller.email, category=self.category)
        ReportedProductFactory(reported_product_id=product.id)
        ReportedProductFactory(reported_product_id=product.id)

        result = self.service.delete_product(product.id, self.admin)

        self.assertTrue(result.ok)
        self.assertEqual(result.value.deleted_count, 1)
        self.assertFalse(Product.objects.filter(id=product.id).exists())
        self.assertFalse(ReportedProduct.objects.filter(reported_product_id=product.id).exists())

    def test_deleting_a_reserved_product_drops_its_booking(self):
        product = ProductFactory(seller_email=self.seller.email, category=self.category)
        BookingService().reserve(product.id, {"booker_name": "B", "booker_email": self.buyer.email})

        result = self.service.delete_product(product.id, self.seller)

        self.assertEqual(result.value.deleted_count, 1)
        self.assertFalse(Booking.objects.filter(product_id=product.id).exists())
        self.assertFalse(BookerEntry.objects.filter(booker_email=self.buyer.email).exists())

    def test_get_product_not_found(self):
        product = ProductFactory(category=self.category)
        product_id = product.id
        product.delete()

        result = self.service.get_product(product_id)

        self.assertEqual(result.error, ErrorCodes.PRODUCT_NOT_FOUND)
