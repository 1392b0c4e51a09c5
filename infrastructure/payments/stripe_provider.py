"""
Stripe Payment Provider
========================

Concrete implementation of PaymentProviderInterface using Stripe.
"""

import logging
from typing import Any, Dict, List, Optional

import stripe
from django.conf import settings
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .interface import PaymentException, PaymentIntent, PaymentProviderInterface, PaymentStatus

logger = logging.getLogger(__name__)

TRANSIENT_STRIPE_ERRORS = (
    stripe.RateLimitError,
    stripe.APIConnectionError,
    stripe.APIError,
)


class StripeProvider(PaymentProviderInterface):
    """
    Stripe payment provider implementation.

    Configuration (in settings.py):
        STRIPE_SECRET_KEY: Stripe secret API key
    """

    def __init__(self):
        """Initialize Stripe provider with API credentials."""
        stripe.api_key = getattr(settings, "STRIPE_SECRET_KEY", "")

        if not stripe.api_key:
            logger.warning("STRIPE_SECRET_KEY not configured")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(TRANSIENT_STRIPE_ERRORS),
        reraise=True,
    )
    def _create_payment_intent_api(self, **kwargs):
        """Internal method to create an intent with retries."""
        return stripe.PaymentIntent.create(**kwargs)

    def create_payment_intent(
        self,
        amount_minor_units: int,
        currency: str,
        payment_method_types: List[str],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PaymentIntent:
        """
        Create a Stripe PaymentIntent.

        Raises:
            PaymentException: If intent creation fails
        """
        try:
            params = {
                "amount": amount_minor_units,
                "currency": currency.lower(),
                "payment_method_types": payment_method_types,
            }
            if metadata:
                params["metadata"] = metadata

            intent = self._create_payment_intent_api(**params)

            logger.info(f"Created Stripe payment intent: {intent.id}")

            return PaymentIntent(
                intent_id=intent.id,
                client_secret=intent.client_secret,
                amount=intent.amount,
                currency=intent.currency,
                status=self._map_stripe_payment_status(intent.status),
                metadata=metadata or {},
            )

        except stripe.StripeError as e:
            logger.error(f"Stripe payment intent creation failed: {str(e)}")
            raise PaymentException(f"Failed to create payment intent: {str(e)}") from e

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(TRANSIENT_STRIPE_ERRORS),
        reraise=True,
    )
    def _retrieve_payment_intent_api(self, intent_id):
        return stripe.PaymentIntent.retrieve(intent_id)

    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        """
        Retrieve Stripe payment intent details.

        Raises:
            PaymentException: If retrieval fails
        """
        try:
            intent = self._retrieve_payment_intent_api(intent_id)

            logger.info(f"Retrieved payment intent: {intent_id}")

            return PaymentIntent(
                intent_id=intent.id,
                client_secret=None,
                amount=intent.amount,
                currency=intent.currency,
                status=self._map_stripe_payment_status(intent.status),
                metadata=dict(intent.metadata or {}),
            )

        except stripe.StripeError as e:
            logger.error(f"Failed to retrieve payment intent {intent_id}: {str(e)}")
            raise PaymentException(f"Payment intent retrieval failed: {str(e)}") from e

    def _map_stripe_payment_status(self, stripe_status: str) -> PaymentStatus:
        """Map Stripe PaymentIntent status to internal PaymentStatus."""
        status_mapping = {
            "requires_payment_method": PaymentStatus.PENDING,
            "requires_confirmation": PaymentStatus.PENDING,
            "requires_action": PaymentStatus.PENDING,
            "processing": PaymentStatus.PROCESSING,
            "requires_capture": PaymentStatus.PROCESSING,
            "succeeded": PaymentStatus.SUCCEEDED,
            "canceled": PaymentStatus.CANCELED,
        }
        return status_mapping.get(stripe_status, PaymentStatus.FAILED)
