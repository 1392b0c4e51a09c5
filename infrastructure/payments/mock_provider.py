"""
Mock Payment Provider
======================

In-memory PaymentProviderInterface for tests and local development. Intents
it creates are immediately reported as succeeded.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from .interface import PaymentException, PaymentIntent, PaymentProviderInterface, PaymentStatus

logger = logging.getLogger(__name__)


class MockPaymentProvider(PaymentProviderInterface):
    def __init__(self):
        self.intents: Dict[str, PaymentIntent] = {}

    def create_payment_intent(
        self,
        amount_minor_units: int,
        currency: str,
        payment_method_types: List[str],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PaymentIntent:
        intent_id = f"pi_mock_{uuid.uuid4().hex[:24]}"
        intent = PaymentIntent(
            intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid.uuid4().hex[:16]}",
            amount=amount_minor_units,
            currency=currency.lower(),
            status=PaymentStatus.SUCCEEDED,
            metadata=metadata or {},
        )
        self.intents[intent_id] = intent
        logger.debug(f"Mock payment intent created: {intent_id}")
        return intent

    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        try:
            return self.intents[intent_id]
        except KeyError as e:
            raise PaymentException(f"No such payment intent: {intent_id}") from e
