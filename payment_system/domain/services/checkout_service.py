"""
CheckoutService - Payment Intents and Sale Finalization

Creating a payment intent is a pure gateway call. Finalizing a sale moves a
product from booked to sold with three writes issued in a fixed order inside
one transaction:

    1. delete the Product (it is no longer available to anyone)
    2. mark the Booking paid and record the buyer
    3. insert the Payment record

A sale is finalized at most once per booking: an already paid booking, or an
existing Payment for the booking or the provider transaction, is rejected
before any write happens, and the unique columns on Payment catch a
concurrent retry that slips past the check. A booking whose product was
withdrawn by its seller cannot be paid for.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Optional

from django.conf import settings
from django.db.models import Q

from authentication.infra.observability.tracing import add_span_attributes, get_tracer
from infrastructure.payments.interface import PaymentException, PaymentIntent, PaymentProviderInterface, PaymentStatus
from marketplace.booking.domain.models.booking import Booking
from marketplace.catalog.domain.models.catalog import Product
from marketplace.catalog.domain.services.catalog_service import CatalogService
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, WriteOutcome, service_err, service_ok
from payment_system.domain.models.payment import Payment
from utils.logging_utils import mask_value
from utils.transaction_utils import TransactionError, atomic_sequence


class CheckoutService(BaseService):
    """
    Service for the payment step of a sale.

    Responsibilities:
    - Request a payment intent from the gateway
    - Finalize a sale once the buyer has paid

    Dependencies:
    - PaymentProviderInterface: gateway (Stripe or mock)
    - CatalogService: product removal
    """

    def __init__(
        self,
        payment_provider: Optional[PaymentProviderInterface] = None,
        catalog_service: Optional[CatalogService] = None,
        verify_with_provider: Optional[bool] = None,
    ):
        """
        Initialize CheckoutService.

        Args:
            payment_provider: Gateway implementation (defaults to the container's)
            catalog_service: CatalogService instance
            verify_with_provider: Confirm the intent succeeded before finalizing
                (defaults to settings.PAYMENT_VERIFY_INTENT)
        """
        super().__init__()
        if payment_provider is None:
            from infrastructure.container import get_payment_provider

            payment_provider = get_payment_provider()
        self.payment_provider = payment_provider
        self.catalog_service = catalog_service or CatalogService()
        if verify_with_provider is None:
            verify_with_provider = getattr(settings, "PAYMENT_VERIFY_INTENT", False)
        self.verify_with_provider = verify_with_provider
        self.tracer = get_tracer(__name__)

    @BaseService.log_performance
    def create_payment_intent(self, price) -> ServiceResult[PaymentIntent]:
        """
        Create a payment intent for ``price`` (major currency units).

        Returns:
            ServiceResult with PaymentIntent; ``client_secret`` goes to the
            buyer's payment UI
        """
        amount = self._parse_amount(price)
        if amount is None or amount <= 0:
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Invalid price: {price!r}")

        amount_minor_units = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

        try:
            intent = self.payment_provider.create_payment_intent(
                amount_minor_units=amount_minor_units,
                currency=getattr(settings, "PAYMENT_CURRENCY", "usd"),
                payment_method_types=list(getattr(settings, "PAYMENT_METHOD_TYPES", ["card"])),
            )
        except PaymentException as e:
            self.logger.error(f"Payment gateway failed creating intent for {amount_minor_units}: {e}")
            return service_err(ErrorCodes.UPSTREAM_FAILURE, str(e))

        return service_ok(intent)

    @BaseService.log_performance
    def finalize_sale(self, payment_record: Dict[str, Any]) -> ServiceResult[WriteOutcome]:
        """
        Record a completed payment and mark the product sold.

        Args:
            payment_record: email, product_id, booking_id, transaction_id and
                optionally amount (defaults to the booking's snapshot price)

        Returns:
            ServiceResult with the Payment insert's WriteOutcome
        """
        email = payment_record.get("email")
        product_id = payment_record.get("product_id")
        booking_id = payment_record.get("booking_id")
        transaction_id = payment_record.get("transaction_id")
        if not all([email, product_id, booking_id, transaction_id]):
            return service_err(
                ErrorCodes.VALIDATION_ERROR, "email, product_id, booking_id and transaction_id are required"
            )

        if self.verify_with_provider:
            confirmed = self._confirm_with_provider(transaction_id)
            if not confirmed.ok:
                return confirmed

        with self.tracer.start_as_current_span("checkout_finalize_sale") as span:
            add_span_attributes(span, booking_id=booking_id, product_id=product_id)
            try:
                with atomic_sequence("finalize_sale") as seq:
                    booking = Booking.objects.select_for_update().filter(id=booking_id).first()
                    if booking is None:
                        return service_err(ErrorCodes.BOOKING_NOT_FOUND, f"Booking {booking_id} not found")

                    rejected = self._check_sale_allowed(booking, product_id, email, transaction_id)
                    if rejected is not None:
                        return rejected

                    product = Product.objects.select_for_update().filter(id=booking.product_id).first()
                    if product is None:
                        self.logger.warning(f"Booking {booking_id} refers to a withdrawn product {booking.product_id}")
                        return service_err(
                            ErrorCodes.PRODUCT_NOT_FOUND, f"Product {booking.product_id} is no longer listed"
                        )

                    amount = self._parse_amount(payment_record.get("amount"))
                    if amount is None:
                        amount = booking.price

                    # 1. product leaves the catalog
                    deleted = self.catalog_service.remove_products(Product.objects.filter(id=product.id))
                    seq.step("delete_product", deleted=deleted)

                    # 2. booking becomes the sale record
                    booking.is_paid = True
                    booking.bought_by = email
                    booking.save(update_fields=["is_paid", "bought_by", "updated_at"])
                    seq.step("mark_booking_paid", matched=1, modified=1, bought_by=email)

                    # 3. payment is recorded
                    payment = Payment.objects.create(
                        email=email,
                        product_id=booking.product_id,
                        booking=booking,
                        amount=amount,
                        transaction_id=transaction_id,
                    )
                    seq.step("insert_payment", inserted_id=str(payment.id))
            except TransactionError as e:
                self.logger.warning(f"Finalization of booking {booking_id} rolled back: {e}")
                return service_err(ErrorCodes.DUPLICATE_PAYMENT, "This payment has already been recorded")

        self.logger.info(f"Sale finalized: booking {booking_id} bought by {mask_value(email)}")
        return service_ok(WriteOutcome.inserted(payment.id))

    def _check_sale_allowed(self, booking: Booking, product_id, email: str, transaction_id: str):
        """Return a failed ServiceResult when the sale must not go ahead, else None."""
        if str(booking.product_id) != str(product_id):
            return service_err(ErrorCodes.VALIDATION_ERROR, "Booking does not belong to this product")

        if booking.is_paid or Payment.objects.filter(Q(booking=booking) | Q(transaction_id=transaction_id)).exists():
            self.logger.warning(f"Duplicate finalization attempt for booking {booking.id}")
            return service_err(ErrorCodes.DUPLICATE_PAYMENT, "This booking has already been paid")

        if booking.seller_removed:
            return service_err(ErrorCodes.CONFLICT_OR_RACE, "The seller of this product has been removed")

        if not booking.bookers.filter(booker_email=email).exists():
            return service_err(ErrorCodes.FORBIDDEN, "Only a buyer who booked this product can pay for it")

        return None

    def _confirm_with_provider(self, transaction_id: str) -> ServiceResult[PaymentIntent]:
        try:
            intent = self.payment_provider.retrieve_payment_intent(transaction_id)
        except PaymentException as e:
            return service_err(ErrorCodes.UPSTREAM_FAILURE, str(e))
        if intent.status != PaymentStatus.SUCCEEDED:
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Payment {transaction_id} is {intent.status.value}")
        return service_ok(intent)

    @staticmethod
    def _parse_amount(value) -> Optional[Decimal]:
        if value is None or value == "":
            return None
        try:
            return Decimal(str(value))
        except (InvalidOperation, ValueError):
            return None
