from .booking_service import BookingService


__all__ = ["BookingService"]
