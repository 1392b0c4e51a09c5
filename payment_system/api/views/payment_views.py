import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.responses import error_response, outcome_response, validation_response
from payment_system.api.serializers.payment_serializers import (
    PaymentIntentRequestSerializer,
    PaymentIntentResponseSerializer,
    PaymentRecordSerializer,
)


logger = logging.getLogger(__name__)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def create_payment_intent(request):
    """
    Create a gateway payment intent for a price.

    **Receives:** price (major currency units)
    **Returns:** client_secret for the buyer's payment UI
    """
    serializer = PaymentIntentRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_response(serializer.errors)

    result = container.checkout_service().create_payment_intent(serializer.validated_data["price"])
    if not result.ok:
        return error_response(result)

    intent = result.value
    return Response(
        PaymentIntentResponseSerializer(
            {
                "client_secret": intent.client_secret,
                "intent_id": intent.intent_id,
                "amount": intent.amount,
                "currency": intent.currency,
            }
        ).data,
        status=status.HTTP_201_CREATED,
    )


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def record_payment(request):
    """
    Finalize a sale: the product leaves the catalog, the booking is marked
    paid by the caller and the payment is stored.
    """
    serializer = PaymentRecordSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_response(serializer.errors)

    record = dict(serializer.validated_data, email=request.user.email)
    result = container.checkout_service().finalize_sale(record)
    return outcome_response(result, success_status=status.HTTP_201_CREATED)
