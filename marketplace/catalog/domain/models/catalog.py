import uuid

from django.core.validators import MinValueValidator
from django.db import models

from .category import Category


class Product(models.Model):
    """
    A listed item. Existence means availability: a sold product is deleted,
    not flagged.
    """

    CONDITION_CHOICES = [
        ("excellent", "Excellent"),
        ("good", "Good"),
        ("fair", "Fair"),
    ]

    # Basic Information
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    image = models.URLField(max_length=500, blank=True)
    location = models.CharField(max_length=200, blank=True)

    # Seller and Category (sellers are joined by email)
    seller_email = models.EmailField(db_index=True)
    seller_phone = models.CharField(max_length=40, blank=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name="products")

    # Pricing
    resale_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    original_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    # Product Details
    condition = models.CharField(max_length=20, choices=CONDITION_CHOICES, default="good")
    years_of_use = models.PositiveIntegerField(default=0)

    # Visibility
    is_advertised = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["category", "-created_at"], name="product_category_idx"),
            models.Index(fields=["is_advertised"], name="product_advertised_idx"),
        ]

    def __str__(self):
        return self.name


class ReportedProduct(models.Model):
    """A report against a product. The same product may be reported many times."""

    reported_product_id = models.UUIDField(db_index=True)
    reported_by = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"

    def __str__(self):
        return f"Report on {self.reported_product_id}"
