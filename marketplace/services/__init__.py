"""
Marketplace Service Layer

This package contains the business logic for the marketplace app, organized
into domain services.

Services:
- CatalogService: Product listing, advertising and deletion
- BookingService: Reservation state machine (unbooked -> booked -> sold)
- ModerationService: Reports and admin account removal

Services live under each domain package and return ServiceResult values built
with the helpers exported here.

Usage:
    from infrastructure.container import container

    booking_service = container.booking_service()
    result = booking_service.reserve(product_id, booker)

    if result.ok:
        outcome = result.value
    else:
        error = result.error
"""

from .base import BaseService, ErrorCodes, ServiceResult, WriteOutcome, service_err, service_ok

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    "WriteOutcome",
    # Helper functions
    "service_ok",
    "service_err",
    # Error codes
    "ErrorCodes",
]
