"""
ModerationService - Reports and Account Administration

Buyers and sellers report products; admins review the reports and remove or
verify accounts. Removing a seller cascades to their products and flags their
bookings so buyers holding a reservation can see the seller is gone.
"""

from typing import Any, Dict, List, Optional

from django.contrib.auth import get_user_model

from authentication.infra.observability.tracing import get_tracer
from marketplace.booking.domain.models.booking import Booking
from marketplace.booking.domain.services.booking_service import BookingService
from marketplace.catalog.domain.models.catalog import Product, ReportedProduct
from marketplace.catalog.domain.services.catalog_service import CatalogService
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, WriteOutcome, service_err, service_ok
from utils.logging_utils import mask_value
from utils.rbac import ROLE_ADMIN, ROLE_BUYER, ROLE_SELLER, check_role
from utils.transaction_utils import atomic_sequence

User = get_user_model()


class ModerationService(BaseService):
    """
    Service for moderation and admin operations.

    Every operation except ``report_product`` requires the admin role; the
    check runs before any write.
    """

    def __init__(
        self,
        booking_service: Optional[BookingService] = None,
        catalog_service: Optional[CatalogService] = None,
    ):
        super().__init__()
        self.booking_service = booking_service or BookingService()
        self.catalog_service = catalog_service or CatalogService()
        self.tracer = get_tracer(__name__)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def report_product(self, product_id, reporter_email: str = "") -> ServiceResult[WriteOutcome]:
        """File a report. Reports are not deduplicated."""
        report = ReportedProduct.objects.create(reported_product_id=product_id, reported_by=reporter_email or "")
        return service_ok(WriteOutcome.inserted(report.id))

    @BaseService.log_performance
    def list_reported(self, requester) -> ServiceResult[List[Dict[str, Any]]]:
        """
        Reported products that still exist, one entry per report.

        Reports on sold or deleted products drop out of the join.
        """
        allowed = check_role(requester, [ROLE_ADMIN])
        if not allowed.ok:
            return allowed

        reports = list(ReportedProduct.objects.all())
        products = Product.objects.in_bulk({report.reported_product_id for report in reports})

        joined = []
        for report in reports:
            product = products.get(report.reported_product_id)
            if product is None:
                continue
            joined.append({"report_id": report.id, "reported_by": report.reported_by, "product": product})
        return service_ok(joined)

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def list_users(self, requester, role: str) -> ServiceResult[List[Any]]:
        """All accounts holding ``role`` (sellers or buyers)."""
        allowed = check_role(requester, [ROLE_ADMIN])
        if not allowed.ok:
            return allowed
        if role not in (ROLE_BUYER, ROLE_SELLER):
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Cannot list role {role}")
        return service_ok(list(User.objects.filter(role=role).order_by("email")))

    @BaseService.log_performance
    def verify_seller(self, requester, seller_id) -> ServiceResult[WriteOutcome]:
        """Mark a seller as verified. Idempotent."""
        allowed = check_role(requester, [ROLE_ADMIN])
        if not allowed.ok:
            return allowed

        matched = User.objects.filter(id=seller_id).count()
        modified = User.objects.filter(id=seller_id, is_verified=False).update(is_verified=True)
        return service_ok(WriteOutcome.updated(matched=matched, modified=modified))

    @BaseService.log_performance
    def remove_buyer(self, requester, user_id) -> ServiceResult[WriteOutcome]:
        """
        Delete a buyer account. Sellers are refused; they go through
        ``remove_seller`` so their listings are cascaded.

        The buyer's open reservations are withdrawn in the same transaction;
        reservations on already paid bookings stay as part of the sale record.
        """
        allowed = check_role(requester, [ROLE_ADMIN])
        if not allowed.ok:
            return allowed

        user = User.objects.filter(id=user_id).first()
        if user is None:
            return service_ok(WriteOutcome.deleted(0))
        if user.is_admin():
            return service_err(ErrorCodes.FORBIDDEN, "Admin accounts cannot be removed here")
        if user.role != ROLE_BUYER:
            return service_err(ErrorCodes.VALIDATION_ERROR, f"User {user_id} is not a buyer")

        with atomic_sequence("remove_buyer") as seq:
            purged = self.booking_service.purge_booker(user.email)
            seq.step("purge_reservations", **purged)

            deleted, _ = User.objects.filter(id=user.id).delete()
            seq.step("delete_user", deleted=deleted)

        return service_ok(WriteOutcome.deleted(1 if deleted else 0))

    @BaseService.log_performance
    def remove_seller(self, requester, email: str) -> ServiceResult[WriteOutcome]:
        """
        Delete a seller and everything they still have for sale.

        Order, within one transaction:
          1. delete the seller's products (and their reports)
          2. flag every booking on the seller's products ``seller_removed``
          3. delete the user row
        """
        allowed = check_role(requester, [ROLE_ADMIN])
        if not allowed.ok:
            return allowed

        user = User.objects.filter(email=email).first()
        if user is not None and user.is_admin():
            return service_err(ErrorCodes.FORBIDDEN, "Admin accounts cannot be removed here")
        if user is not None and user.role != ROLE_SELLER:
            return service_err(ErrorCodes.VALIDATION_ERROR, f"{mask_value(email)} is not a seller")

        with self.tracer.start_as_current_span("moderation_remove_seller"):
            with atomic_sequence("remove_seller") as seq:
                products_deleted = self.catalog_service.remove_products(Product.objects.filter(seller_email=email))
                seq.step("delete_products", deleted=products_deleted)

                bookings_flagged = Booking.objects.filter(seller_email=email).update(seller_removed=True)
                seq.step("flag_bookings", modified=bookings_flagged)

                users_deleted, _ = User.objects.filter(email=email).delete()
                seq.step("delete_user", deleted=users_deleted)

        self.logger.info(
            f"Removed seller {mask_value(email)}: {products_deleted} product(s), {bookings_flagged} booking(s) flagged"
        )
        return service_ok(WriteOutcome.deleted(1 if users_deleted else 0))
