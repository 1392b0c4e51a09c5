from payment_system.domain.models import Payment


__all__ = [
    "Payment",
]
