"""
BookingService - Reservation State Machine

A product moves through three states:

    unbooked  no Booking row for the product
    booked    Booking row exists, is_paid is False
    sold      Booking row exists, is_paid is True, the Product row is gone

The first reservation of a product creates its Booking and snapshots the
product fields; later reservations append a BookerEntry. Two first
reservations racing each other are reconciled by the unique constraint on
``Booking.product_id``: the loser's insert fails inside a savepoint, it re-reads
the winner's row under lock and appends to it, so neither buyer is lost.
"""

from typing import Any, Dict, List

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Prefetch

from authentication.infra.observability.tracing import add_span_attributes, get_tracer
from marketplace.booking.domain.models.booking import BookerEntry, Booking
from marketplace.catalog.domain.models.catalog import Product
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, WriteOutcome, service_err, service_ok
from utils.logging_utils import mask_value
from utils.rbac import ROLE_ADMIN, resolve_role

BOOKER_FIELDS = ("booker_name", "booker_email", "booker_location", "booker_number")


class BookingService(BaseService):
    """
    Service owning reservations.

    Responsibilities:
    - Create or extend a product's booking (reserve)
    - Withdraw a buyer's reservation (unreserve)
    - Answer "who booked what" for buyers and sellers
    - Purge a removed buyer's open reservations
    """

    def __init__(self):
        super().__init__()
        self.tracer = get_tracer(__name__)

    @BaseService.log_performance
    def reserve(self, product_id, booker: Dict[str, Any]) -> ServiceResult[WriteOutcome]:
        """
        Reserve a product for a buyer.

        Args:
            product_id: Product being reserved
            booker: booker_name, booker_email, booker_location, booker_number

        Returns:
            ServiceResult with WriteOutcome:
            - insertedId when this call created the booking
            - matched 1 / modified 1 when the buyer was appended
            - matched 1 / modified 0 when the buyer was already listed
        """
        entry = {key: (booker.get(key) or "") for key in BOOKER_FIELDS}
        if not entry["booker_email"] or not entry["booker_name"]:
            return service_err(ErrorCodes.VALIDATION_ERROR, "booker_name and booker_email are required")

        with self.tracer.start_as_current_span("booking_reserve") as span:
            add_span_attributes(span, product_id=product_id)

            with transaction.atomic():
                booking = Booking.objects.select_for_update().filter(product_id=product_id).first()
                if booking is not None and booking.is_paid:
                    return service_err(ErrorCodes.ALREADY_SOLD, f"Product {product_id} has already been sold")

                product = Product.objects.filter(id=product_id).first()
                if product is None:
                    return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} is not available")
                if product.seller_email == entry["booker_email"]:
                    return service_err(ErrorCodes.FORBIDDEN, "Sellers cannot book their own products")

                created = False
                if booking is None:
                    booking, created = self._create_or_join_booking(product)

                if booking.bookers.filter(booker_email=entry["booker_email"]).exists():
                    self.logger.info(
                        f"{mask_value(entry['booker_email'])} already holds a reservation on booking {booking.id}"
                    )
                    return service_ok(WriteOutcome.updated(matched=1, modified=0))

                try:
                    with transaction.atomic():
                        BookerEntry.objects.create(booking=booking, **entry)
                except IntegrityError:
                    # Same buyer reserving twice at once; the other request already appended
                    return service_ok(WriteOutcome.updated(matched=1, modified=0))

            span.set_attribute("booking.created", created)

        self.logger.info(
            f"Reserved product {product_id} for {mask_value(entry['booker_email'])} "
            f"({'new booking' if created else 'appended'} {booking.id})"
        )
        if created:
            return service_ok(WriteOutcome.inserted(booking.id))
        return service_ok(WriteOutcome.updated(matched=1, modified=1))

    def _create_or_join_booking(self, product: Product):
        """
        Insert the booking for ``product`` or, if a concurrent reservation
        inserted it first, lock and return that row instead.

        Returns:
            (booking, created)
        """
        try:
            with transaction.atomic():
                booking = Booking.objects.create(
                    product_id=product.id,
                    seller_email=product.seller_email,
                    seller_contact=product.seller_phone,
                    product_name=product.name,
                    price=product.resale_price,
                    image=product.image,
                )
            return booking, True
        except IntegrityError:
            self.logger.info(f"Concurrent first reservation on product {product.id}, joining existing booking")
            return Booking.objects.select_for_update().get(product_id=product.id), False

    @BaseService.log_performance
    def unreserve(self, product_id, email: str) -> ServiceResult[WriteOutcome]:
        """
        Withdraw ``email``'s reservation on a product.

        An unpaid booking left without bookers is deleted, returning the
        product to the unbooked state. A sold booking cannot be changed.
        """
        with transaction.atomic():
            booking = Booking.objects.select_for_update().filter(product_id=product_id).first()
            if booking is None:
                return service_ok(WriteOutcome.updated(matched=0, modified=0))
            if booking.is_paid:
                return service_err(ErrorCodes.ALREADY_SOLD, "A sold booking cannot be withdrawn")

            removed, _ = booking.bookers.filter(booker_email=email).delete()
            if removed and not booking.bookers.exists():
                booking_id = booking.id
                booking.delete()
                self.logger.info(f"Deleted booking {booking_id}: last booker withdrew")

        return service_ok(WriteOutcome.updated(matched=1, modified=1 if removed else 0))

    @BaseService.log_performance
    def list_for_buyer(self, email: str) -> ServiceResult[List[Booking]]:
        """
        Bookings ``email`` has a reservation on.

        Each booking carries ``visible_bookers``: only this buyer's own
        entries. Other buyers' contact details never leave this method.
        """
        own_entries = BookerEntry.objects.filter(booker_email=email)
        bookings = (
            Booking.objects.filter(bookers__booker_email=email)
            .distinct()
            .prefetch_related(Prefetch("bookers", queryset=own_entries, to_attr="visible_bookers"))
        )
        return service_ok(list(bookings))

    @BaseService.log_performance
    def list_for_seller(self, email: str) -> ServiceResult[List[Booking]]:
        """Bookings on ``email``'s products, with every booker visible to the seller."""
        bookings = Booking.objects.filter(seller_email=email).prefetch_related(
            Prefetch("bookers", queryset=BookerEntry.objects.all(), to_attr="visible_bookers")
        )
        return service_ok(list(bookings))

    def get_by_id(self, booking_id) -> ServiceResult[Booking]:
        try:
            booking = Booking.objects.filter(id=booking_id).first()
        except (ValueError, DjangoValidationError):
            booking = None
        if booking is None:
            return service_err(ErrorCodes.BOOKING_NOT_FOUND, f"Booking {booking_id} not found")
        return service_ok(booking)

    def get_for_caller(self, booking_id, caller) -> ServiceResult[Booking]:
        """
        Fetch a booking with the entries ``caller`` may see.

        The seller and admins see every booker, a buyer sees only their own
        entry, and anyone else is refused.
        """
        result = self.get_by_id(booking_id)
        if not result.ok:
            return result
        booking = result.value

        if booking.seller_email == caller.email or resolve_role(caller) == ROLE_ADMIN:
            booking.visible_bookers = list(booking.bookers.all())
            return service_ok(booking)

        own_entries = list(booking.bookers.filter(booker_email=caller.email))
        if not own_entries:
            return service_err(ErrorCodes.FORBIDDEN, "You have no reservation on this booking")
        booking.visible_bookers = own_entries
        return service_ok(booking)

    def purge_booker(self, email: str) -> Dict[str, int]:
        """
        Remove ``email`` from every unpaid booking and drop bookings left empty.

        Paid bookings are sale records and keep their entries. Must be called
        inside a transaction.
        """
        open_entries = BookerEntry.objects.filter(booker_email=email, booking__is_paid=False)
        booking_ids = list(open_entries.values_list("booking_id", flat=True))
        entries_removed, _ = open_entries.delete()
        bookings_removed, _ = Booking.objects.filter(id__in=booking_ids, is_paid=False, bookers__isnull=True).delete()
        self.logger.info(
            f"Purged {mask_value(email)}: {entries_removed} reservation(s), {bookings_removed} empty booking(s)"
        )
        return {"entries_removed": entries_removed, "bookings_removed": bookings_removed}
