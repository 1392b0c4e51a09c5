from django.db import models


class Booking(models.Model):
    """
    Reservation record for one product.

    ``product_id`` is a logical reference: the product row disappears when the
    sale completes while the booking stays behind as the sale record. The
    unique constraint on it is what lets two concurrent first reservations
    converge on a single booking.
    """

    product_id = models.UUIDField(unique=True)

    # Snapshot taken at first reservation
    seller_email = models.EmailField(db_index=True)
    seller_contact = models.CharField(max_length=40, blank=True)
    product_name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    image = models.URLField(max_length=500, blank=True)

    # Sale status
    is_paid = models.BooleanField(default=False)
    bought_by = models.EmailField(blank=True)
    seller_removed = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"

    @property
    def state(self) -> str:
        return "sold" if self.is_paid else "booked"

    def __str__(self):
        return f"Booking for {self.product_name} ({self.state})"


class BookerEntry(models.Model):
    """One buyer's reservation on a booking; ordering by id keeps insertion order."""

    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="bookers")
    booker_name = models.CharField(max_length=150)
    booker_email = models.EmailField(db_index=True)
    booker_location = models.CharField(max_length=200, blank=True)
    booker_number = models.CharField(max_length=40, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        app_label = "marketplace"
        constraints = [
            models.UniqueConstraint(fields=["booking", "booker_email"], name="unique_booker_per_booking"),
        ]

    def __str__(self):
        return f"{self.booker_email} on booking {self.booking_id}"
