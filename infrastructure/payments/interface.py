"""
Payment Provider Interface
===========================

Abstract base class defining the contract for payment operations the checkout
flow needs: creating a payment intent for the buyer's payment UI and reading
an intent back to confirm it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class PaymentStatus(str, Enum):
    """Payment status enumeration."""

    PENDING = "pending"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


@dataclass
class PaymentIntent:
    """
    Represents a payment intent.

    Attributes:
        intent_id: Unique payment intent identifier
        client_secret: Opaque secret handed to the buyer's payment UI
        amount: Payment amount in smallest currency unit
        currency: ISO currency code
        status: Current payment status
        metadata: Additional custom data
    """

    intent_id: str
    client_secret: Optional[str]
    amount: int
    currency: str
    status: PaymentStatus
    metadata: Dict[str, Any] = field(default_factory=dict)


class PaymentProviderInterface(ABC):
    """
    Abstract interface for payment provider operations.

    Concrete implementations:
        - StripeProvider: Stripe payment processing
        - MockPaymentProvider: in-memory provider for tests and local runs
    """

    @abstractmethod
    def create_payment_intent(
        self,
        amount_minor_units: int,
        currency: str,
        payment_method_types: List[str],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PaymentIntent:
        """
        Create a payment intent.

        Args:
            amount_minor_units: Amount in the smallest currency unit (cents)
            currency: ISO currency code
            payment_method_types: Allowed methods (e.g. ["card"])
            metadata: Custom data to attach to the intent

        Returns:
            PaymentIntent carrying the client secret

        Raises:
            PaymentException: If intent creation fails
        """
        pass

    @abstractmethod
    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        """
        Retrieve payment intent details.

        Raises:
            PaymentException: If retrieval fails
        """
        pass


class PaymentException(Exception):
    """Base exception for payment operations."""

    pass
