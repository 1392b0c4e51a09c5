"""DRF authentication backed by the authorization gate."""

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication

from authentication.domain.exceptions import AuthorizationError
from authentication.domain.services.token_service import extract_bearer, resolve_caller, verify_credential


class BearerTokenAuthentication(BaseAuthentication):
    """
    Authenticate ``Authorization: Bearer <token>`` requests.

    A missing header leaves the request anonymous so permission classes answer
    401; a present but bad credential is answered with 403.
    """

    keyword = "Bearer"

    def authenticate(self, request):
        header = request.META.get("HTTP_AUTHORIZATION")
        if not header:
            return None

        try:
            claims = verify_credential(extract_bearer(header))
            user = resolve_caller(claims)
        except AuthorizationError as e:
            raise exceptions.PermissionDenied(e.message) from e

        return (user, claims)

    def authenticate_header(self, request):
        return self.keyword
