from .checkout_service import CheckoutService


__all__ = ["CheckoutService"]
