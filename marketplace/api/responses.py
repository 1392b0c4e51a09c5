import logging

from rest_framework import status
from rest_framework.response import Response

from marketplace.services.base import ErrorCodes, ServiceResult


logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCodes.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCodes.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.PRODUCT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.CATEGORY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.BOOKING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.CONFLICT_OR_RACE: status.HTTP_409_CONFLICT,
    ErrorCodes.ALREADY_SOLD: status.HTTP_409_CONFLICT,
    ErrorCodes.DUPLICATE_PAYMENT: status.HTTP_409_CONFLICT,
    ErrorCodes.UPSTREAM_FAILURE: status.HTTP_502_BAD_GATEWAY,
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(result: ServiceResult) -> Response:
    """Render a failed ServiceResult with the HTTP status its error code maps to."""
    http_status = ERROR_STATUS.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if http_status >= 500:
        logger.error(f"Service error {result.error}: {result.error_detail}")
    return Response(result.to_dict(), status=http_status)


def outcome_response(result: ServiceResult, success_status: int = status.HTTP_200_OK) -> Response:
    """Render a ServiceResult carrying a WriteOutcome as its descriptor dict."""
    if not result.ok:
        return error_response(result)
    return Response(result.value.to_dict(), status=success_status)


def validation_response(errors) -> Response:
    return Response(
        {"success": False, "error": {"code": ErrorCodes.VALIDATION_ERROR, "message": errors}},
        status=status.HTTP_400_BAD_REQUEST,
    )
