"""
Authorization gate.

Turns a bearer credential into the caller's identity and mints new
credentials. The role embedded in a token is informational only: every role
check re-reads the persisted role (see ``utils.rbac``).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth import get_user_model
from rest_framework_simplejwt.exceptions import TokenError

from authentication.domain.exceptions import Forbidden, Unauthenticated
from authentication.jwt_serializers import RoleAccessToken
from utils.logging_utils import mask_value

logger = logging.getLogger(__name__)

BEARER_KEYWORD = "bearer"


@dataclass(frozen=True)
class TokenClaims:
    """Decoded identity carried by a credential."""

    email: str
    role: Optional[str] = None


def extract_bearer(authorization_header: Optional[str]) -> str:
    """Pull the raw credential out of an ``Authorization: Bearer ...`` header."""
    if not authorization_header or not authorization_header.strip():
        raise Unauthenticated()

    parts = authorization_header.split()
    if len(parts) != 2 or parts[0].lower() != BEARER_KEYWORD:
        raise Forbidden("Malformed authorization header.")
    return parts[1]


def verify_credential(credential: Optional[str]) -> TokenClaims:
    """
    Decode and validate a credential.

    Raises:
        Unauthenticated: no credential was supplied
        Forbidden: the credential is invalid, expired or carries no email
    """
    if not credential:
        raise Unauthenticated()

    try:
        token = RoleAccessToken(credential)
    except TokenError as e:
        logger.info(f"Rejected credential: {e}")
        raise Forbidden("Invalid or expired credential.") from e

    email = token.get("email")
    if not email:
        raise Forbidden("Credential does not identify a user.")
    return TokenClaims(email=email, role=token.get("role"))


def resolve_caller(claims: TokenClaims):
    """Look the caller up by the email embedded in the credential."""
    User = get_user_model()
    user = User.objects.filter(email=claims.email).first()
    if user is None or not user.is_active:
        raise Forbidden("Account no longer exists.")
    return user


def issue_token(email: str) -> str:
    """
    Mint a signed credential for an existing user.

    The token embeds ``{email, role}`` and expires after
    ``SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]`` (one day).

    Raises:
        Forbidden: no user is registered under ``email``
    """
    User = get_user_model()
    user = User.objects.filter(email=email).first()
    if user is None:
        logger.warning(f"Token requested for unknown email {mask_value(email or '')}")
        raise Forbidden("No account is registered for this email.")

    token = RoleAccessToken.for_user(user)
    logger.info(f"Issued access token for {mask_value(user.email)} (role={user.role})")
    return str(token)
