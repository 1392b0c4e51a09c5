from marketplace.booking.domain.models import BookerEntry, Booking
from marketplace.catalog.domain.models import Category, Product, ReportedProduct


__all__ = [
    "Category",
    "Product",
    "ReportedProduct",
    "Booking",
    "BookerEntry",
]
