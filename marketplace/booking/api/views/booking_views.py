import logging
import uuid

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from authentication.permissions import SellerRequired
from infrastructure.container import container
from marketplace.api.responses import error_response, outcome_response, validation_response
from marketplace.booking.api.serializers.booking_serializers import BookingSerializer, ReserveRequestSerializer
from marketplace.booking.domain.services.booking_service import BookingService
from marketplace.services.base import ErrorCodes, service_err


logger = logging.getLogger(__name__)


class BookingViewSet(viewsets.ViewSet):
    """
    Reservations. The booker's email is always the authenticated caller's;
    it is never taken from the request body.
    """

    def get_permissions(self):
        if self.action == "seller":
            return [SellerRequired()]
        return [IsAuthenticated()]

    def get_service(self) -> BookingService:
        return container.booking_service()

    def list(self, request):
        result = self.get_service().list_for_buyer(request.user.email)
        if not result.ok:
            return error_response(result)
        return Response(BookingSerializer(result.value, many=True).data)

    def create(self, request):
        serializer = ReserveRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        data = serializer.validated_data
        booker = {
            "booker_name": data.get("booker_name") or request.user.name or request.user.email,
            "booker_email": request.user.email,
            "booker_location": data.get("booker_location", ""),
            "booker_number": data.get("booker_number", ""),
        }
        result = self.get_service().reserve(data["product_id"], booker)
        if result.ok and result.value.inserted_id is not None:
            return outcome_response(result, success_status=status.HTTP_201_CREATED)
        return outcome_response(result)

    def retrieve(self, request, pk=None):
        result = self.get_service().get_for_caller(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(BookingSerializer(result.value).data)

    @action(detail=False, methods=["get"])
    def seller(self, request):
        result = self.get_service().list_for_seller(request.user.email)
        if not result.ok:
            return error_response(result)
        return Response(BookingSerializer(result.value, many=True).data)

    @action(detail=True, methods=["delete"])
    def mine(self, request, pk=None):
        """Withdraw the caller's reservation; ``pk`` is the product id."""
        try:
            product_id = uuid.UUID(str(pk))
        except ValueError:
            return error_response(service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {pk} not found"))

        result = self.get_service().unreserve(product_id, request.user.email)
        return outcome_response(result)
