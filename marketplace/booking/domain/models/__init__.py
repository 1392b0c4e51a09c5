from .booking import BookerEntry, Booking


__all__ = [
    "Booking",
    "BookerEntry",
]
