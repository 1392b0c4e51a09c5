"""
CatalogService - Products and Categories

Handles product listing, creation, advertising and deletion. A product's
existence is its availability: sold or removed products are deleted rows, so
every "available" query is a plain read.
"""

import logging
from typing import Any, Dict, List, Optional

from django.contrib.auth import get_user_model
from django.db import transaction

from marketplace.booking.domain.models.booking import Booking
from marketplace.catalog.domain.models.catalog import Product, ReportedProduct
from marketplace.catalog.domain.models.category import Category
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, WriteOutcome, service_err, service_ok
from utils.rbac import ROLE_ADMIN, ROLE_SELLER, check_role, resolve_role


User = get_user_model()
logger = logging.getLogger(__name__)

PRODUCT_FIELDS = (
    "name",
    "description",
    "image",
    "location",
    "seller_phone",
    "resale_price",
    "original_price",
    "condition",
    "years_of_use",
)


class CatalogService(BaseService):
    """
    Service for managing product catalog operations.

    Responsibilities:
    - List products by seller, by category, or advertised
    - Create products (seller only)
    - Toggle the advertised flag (owner or admin)
    - Delete products together with their reports (owner or admin)

    Enriched listings join each product with its seller's account and drop
    the seller's email from the output.
    """

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def list_categories(self) -> ServiceResult[List[Category]]:
        return service_ok(list(Category.objects.all()))

    def get_category(self, category_id: str) -> ServiceResult[Category]:
        category = self._resolve_category(category_id)
        if category is None:
            return service_err(ErrorCodes.CATEGORY_NOT_FOUND, f"Category {category_id} not found")
        return service_ok(category)

    def _resolve_category(self, category_ref) -> Optional[Category]:
        """Normalize a category reference (instance, identity key or name) to the Category row."""
        if isinstance(category_ref, Category):
            return category_ref
        if not category_ref:
            return None
        category_ref = str(category_ref)
        return (
            Category.objects.filter(pk=category_ref).first()
            or Category.objects.filter(name__iexact=category_ref).first()
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def list_by_seller(self, email: str) -> ServiceResult[List[Product]]:
        """Products currently listed by ``email``, newest first."""
        return service_ok(list(Product.objects.filter(seller_email=email).select_related("category")))

    @BaseService.log_performance
    def list_by_category(self, category_id: str, enriched: bool = False) -> ServiceResult[List[Any]]:
        """
        Products in a category. Unknown categories yield an empty list.

        Args:
            category_id: Category identity key
            enriched: Join seller details and hide seller email
        """
        products = list(Product.objects.filter(category_id=category_id).select_related("category"))
        return service_ok(self._enrich(products) if enriched else products)

    @BaseService.log_performance
    def list_advertised(self, enriched: bool = False) -> ServiceResult[List[Any]]:
        """Products with the advertised flag set."""
        products = list(Product.objects.filter(is_advertised=True).select_related("category"))
        return service_ok(self._enrich(products) if enriched else products)

    def get_product(self, product_id) -> ServiceResult[Product]:
        product = Product.objects.select_related("category").filter(id=product_id).first()
        if product is None:
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
        return service_ok(product)

    def _enrich(self, products: List[Product]) -> List[Dict[str, Any]]:
        """
        Join products with their sellers' accounts in one query.

        The returned dicts carry ``seller_name`` and ``seller_verified`` but
        never ``seller_email``.
        """
        emails = {product.seller_email for product in products}
        sellers = {user.email: user for user in User.objects.filter(email__in=emails).only("email", "name", "is_verified")}

        enriched = []
        for product in products:
            seller = sellers.get(product.seller_email)
            enriched.append(
                {
                    "id": str(product.id),
                    "name": product.name,
                    "description": product.description,
                    "image": product.image,
                    "location": product.location,
                    "category_id": product.category_id,
                    "resale_price": product.resale_price,
                    "original_price": product.original_price,
                    "condition": product.condition,
                    "years_of_use": product.years_of_use,
                    "seller_phone": product.seller_phone,
                    "is_advertised": product.is_advertised,
                    "created_at": product.created_at,
                    "seller_name": seller.name if seller else None,
                    "seller_verified": bool(seller and seller.is_verified),
                }
            )
        return enriched

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def create_product(self, seller, data: Dict[str, Any]) -> ServiceResult[WriteOutcome]:
        """
        Create a product owned by ``seller``.

        Args:
            seller: Authenticated user (must hold the seller role, or admin)
            data: Product fields plus ``category_id`` (identity key or name)

        Returns:
            ServiceResult with WriteOutcome whose insertedId is the product id
        """
        allowed = check_role(seller, [ROLE_SELLER, ROLE_ADMIN])
        if not allowed.ok:
            return allowed

        category = self._resolve_category(data.get("category_id") or data.get("category"))
        if category is None:
            return service_err(
                ErrorCodes.CATEGORY_NOT_FOUND,
                f"Category {data.get('category_id') or data.get('category')} not found",
            )

        if data.get("resale_price") is None:
            return service_err(ErrorCodes.VALIDATION_ERROR, "resale_price is required")

        fields = {key: data[key] for key in PRODUCT_FIELDS if data.get(key) is not None}
        product = Product.objects.create(seller_email=seller.email, category=category, **fields)

        self.logger.info(f"Created product {product.id} in category {category.pk}")
        return service_ok(WriteOutcome.inserted(product.id))

    @BaseService.log_performance
    def set_advertised(self, product_id, requester) -> ServiceResult[WriteOutcome]:
        """
        Flag a product as advertised. Idempotent.

        A product that no longer exists is not an error and is never created:
        the outcome simply reports zero matches.
        """
        with transaction.atomic():
            product = Product.objects.select_for_update().filter(id=product_id).first()
            if product is None:
                self.logger.info(f"Advertise skipped, product {product_id} does not exist")
                return service_ok(WriteOutcome.updated(matched=0, modified=0))

            allowed = self._check_owner_or_admin(product, requester)
            if not allowed.ok:
                return allowed

            if product.is_advertised:
                return service_ok(WriteOutcome.updated(matched=1, modified=0))

            product.is_advertised = True
            product.save(update_fields=["is_advertised"])

        return service_ok(WriteOutcome.updated(matched=1, modified=1))

    @BaseService.log_performance
    def delete_product(self, product_id, requester) -> ServiceResult[WriteOutcome]:
        """
        Withdraw a product: delete it, every report that references it and
        its unpaid booking, so nobody can pay for it afterwards.

        All deletes run in one transaction. The booking is locked before the
        product, in the same order checkout takes them.
        """
        with transaction.atomic():
            list(Booking.objects.select_for_update().filter(product_id=product_id))
            product = Product.objects.select_for_update().filter(id=product_id).first()
            if product is None:
                return service_ok(WriteOutcome.deleted(0))

            allowed = self._check_owner_or_admin(product, requester)
            if not allowed.ok:
                return allowed

            deleted = self.remove_products(Product.objects.filter(id=product.id))
            bookings_deleted, _ = Booking.objects.filter(product_id=product.id, is_paid=False).delete()
            if bookings_deleted:
                self.logger.info(f"Withdrew product {product.id}: dropped its open booking")

        return service_ok(WriteOutcome.deleted(deleted))

    def remove_products(self, queryset) -> int:
        """
        Delete the products in ``queryset`` and their reports.

        Must be called inside a transaction; returns the number of products
        deleted.
        """
        product_ids = list(queryset.values_list("id", flat=True))
        if not product_ids:
            return 0

        reports_deleted, _ = ReportedProduct.objects.filter(reported_product_id__in=product_ids).delete()
        products_deleted, _ = Product.objects.filter(id__in=product_ids).delete()
        self.logger.info(f"Deleted {products_deleted} product(s) and {reports_deleted} report(s)")
        return products_deleted

    def _check_owner_or_admin(self, product: Product, requester) -> ServiceResult[None]:
        if requester is None or not getattr(requester, "is_authenticated", False):
            return service_err(ErrorCodes.UNAUTHENTICATED, "Authentication credentials were not provided.")
        if product.seller_email == requester.email:
            return service_ok(None)
        if resolve_role(requester) == ROLE_ADMIN:
            return service_ok(None)
        self.logger.warning(f"Product {product.id} write denied: requester is not the owner")
        return service_err(ErrorCodes.FORBIDDEN, "Only the product's seller or an admin may change it.")
