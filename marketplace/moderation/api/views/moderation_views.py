import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from authentication.api.serializers.user_serializers import UserSerializer
from authentication.permissions import AdminRequired
from infrastructure.container import container
from marketplace.api.responses import error_response, outcome_response, validation_response
from marketplace.moderation.api.serializers.report_serializers import ReportedProductSerializer, ReportRequestSerializer
from utils.rbac import ROLE_BUYER, ROLE_SELLER


logger = logging.getLogger(__name__)


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated])
def reports(request):
    """
    POST: report a product (any signed-in user).
    GET: reported products that still exist (admin; checked by the service).
    """
    service = container.moderation_service()

    if request.method == "POST":
        serializer = ReportRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)
        result = service.report_product(serializer.validated_data["product_id"], request.user.email)
        return outcome_response(result, success_status=status.HTTP_201_CREATED)

    result = service.list_reported(request.user)
    if not result.ok:
        return error_response(result)
    return Response(ReportedProductSerializer(result.value, many=True).data)


def _list_role(request, role):
    result = container.moderation_service().list_users(request.user, role)
    if not result.ok:
        return error_response(result)
    return Response(UserSerializer(result.value, many=True).data)


@api_view(["GET"])
@permission_classes([AdminRequired])
def list_sellers(request):
    return _list_role(request, ROLE_SELLER)


@api_view(["GET"])
@permission_classes([AdminRequired])
def list_buyers(request):
    return _list_role(request, ROLE_BUYER)


@api_view(["PATCH"])
@permission_classes([AdminRequired])
def verify_seller(request, seller_id):
    result = container.moderation_service().verify_seller(request.user, seller_id)
    return outcome_response(result)


@api_view(["DELETE"])
@permission_classes([AdminRequired])
def remove_buyer(request, user_id):
    result = container.moderation_service().remove_buyer(request.user, user_id)
    return outcome_response(result)


@api_view(["DELETE"])
@permission_classes([AdminRequired])
def remove_seller(request, email):
    logger.info("Admin requested removal of a seller account")
    result = container.moderation_service().remove_seller(request.user, email)
    return outcome_response(result)
