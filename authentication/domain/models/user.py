import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    ROLE_BUYER = "buyer"
    ROLE_SELLER = "seller"
    ROLE_ADMIN = "admin"

    ROLE_CHOICES = [
        (ROLE_BUYER, "Buyer"),
        (ROLE_SELLER, "Seller"),
        (ROLE_ADMIN, "Admin"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, blank=True)
    photo_url = models.URLField(max_length=500, blank=True)

    # Role system - simple field
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_BUYER)

    # Set by an admin once a seller has been checked
    is_verified = models.BooleanField(default=False)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        app_label = "authentication"

    def is_seller(self):
        """Check if user sells products"""
        return self.role == self.ROLE_SELLER

    def is_admin(self):
        """Check if user is an admin"""
        return self.role == self.ROLE_ADMIN or self.is_superuser

    def can_sell_products(self):
        """Check if user can create and sell products"""
        return self.is_seller() or self.is_admin()

    def __str__(self):
        return self.email
