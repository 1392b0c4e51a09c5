"""
Dependency Injection Container
================================

Simple service locator for the payment provider and the domain services.
Everything is built lazily on first use and then shared by reference.

Usage:
    from infrastructure.container import container

    booking_service = container.booking_service()
    payment = container.payment()
"""

import logging
from typing import Optional

from .payments import PaymentFactory, PaymentProviderInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure dependencies and domain services.

    Implements lazy initialization and caching of service instances.
    Singleton: every ``ServiceContainer()`` call returns the same object.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._payment: Optional[PaymentProviderInterface] = None

            # Domain Services
            self._user_service = None
            self._catalog_service = None
            self._booking_service = None
            self._moderation_service = None
            self._checkout_service = None

            self._initialized = True
            logger.info("Service container initialized")

    def payment(self, backend: Optional[str] = None) -> PaymentProviderInterface:
        """
        Get payment provider instance.

        Args:
            backend: Payment backend type ('stripe' or 'mock').
                    If None, uses configuration from settings
        """
        if self._payment is None or backend is not None:
            self._payment = PaymentFactory.create(backend)
            logger.debug(f"Created payment service: {type(self._payment).__name__}")

        return self._payment

    def user_service(self):
        """Get UserService instance."""
        if self._user_service is None:
            from authentication.domain.services.user_service import UserService

            self._user_service = UserService()
            logger.debug("Created UserService")
        return self._user_service

    def catalog_service(self):
        """Get CatalogService instance."""
        if self._catalog_service is None:
            from marketplace.catalog.domain.services.catalog_service import CatalogService

            self._catalog_service = CatalogService()
            logger.debug("Created CatalogService")
        return self._catalog_service

    def booking_service(self):
        """Get BookingService instance."""
        if self._booking_service is None:
            from marketplace.booking.domain.services.booking_service import BookingService

            self._booking_service = BookingService()
            logger.debug("Created BookingService")
        return self._booking_service

    def moderation_service(self):
        """Get ModerationService instance."""
        if self._moderation_service is None:
            from marketplace.moderation.domain.services.moderation_service import ModerationService

            self._moderation_service = ModerationService(booking_service=self.booking_service())
            logger.debug("Created ModerationService")
        return self._moderation_service

    def checkout_service(self):
        """Get CheckoutService instance."""
        if self._checkout_service is None:
            from payment_system.domain.services.checkout_service import CheckoutService

            # CheckoutService depends on the payment provider
            self._checkout_service = CheckoutService(payment_provider=self.payment())
            logger.debug("Created CheckoutService")
        return self._checkout_service

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when switching between environments.
        """
        self._payment = None
        self._user_service = None
        self._catalog_service = None
        self._booking_service = None
        self._moderation_service = None
        self._checkout_service = None
        logger.info("Service container reset")


# Global singleton instance
container = ServiceContainer()


def get_payment_provider() -> PaymentProviderInterface:
    """Get payment provider from global container."""
    return container.payment()
