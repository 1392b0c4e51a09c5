import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers.user_serializers import TokenRequestSerializer, UserUpsertSerializer
from authentication.domain.exceptions import AuthorizationError
from authentication.domain.services import issue_token
from infrastructure.container import container
from marketplace.api.responses import error_response, outcome_response, validation_response


logger = logging.getLogger(__name__)


class UserUpsertView(APIView):
    """Create or refresh the account behind an email after client-side sign-in."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = UserUpsertSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        data = serializer.validated_data
        result = container.user_service().upsert_user(
            email=data["email"],
            name=data.get("name"),
            role=data.get("role"),
            photo_url=data.get("photo_url"),
        )
        if result.ok and result.value.upserted_id is not None:
            return outcome_response(result, success_status=status.HTTP_201_CREATED)
        return outcome_response(result)


class UserRoleView(APIView):
    """Which role the account behind ``email`` holds."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, email):
        result = container.user_service().get_role(email)
        if not result.ok:
            return error_response(result)
        return Response(result.value)


class IssueTokenView(APIView):
    """Mint an access token for a registered email."""

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = TokenRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        try:
            token = issue_token(serializer.validated_data["email"])
        except AuthorizationError as e:
            return Response({"detail": e.message, "token": ""}, status=status.HTTP_403_FORBIDDEN)

        return Response({"token": token}, status=status.HTTP_200_OK)
