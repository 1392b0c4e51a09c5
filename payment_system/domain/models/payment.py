import uuid

from django.core.validators import MinValueValidator
from django.db import models


class Payment(models.Model):
    """
    Record of a completed sale. Append-only.

    One payment per booking and per provider transaction: both columns are
    unique, so a retried finalization can never insert a second record.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Buyer and what was bought
    email = models.EmailField(db_index=True)
    product_id = models.UUIDField(db_index=True)
    booking = models.OneToOneField("marketplace.Booking", on_delete=models.PROTECT, related_name="payment")

    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    transaction_id = models.CharField(
        max_length=255,
        unique=True,
        help_text="Payment provider reference (e.g. Stripe PaymentIntent id)",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "payment_system"

    def __str__(self):
        return f"Payment {self.transaction_id} for booking {self.booking_id}"
