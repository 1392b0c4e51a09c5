"""
Business logic services for authentication.

Services encapsulate the user registry and the authorization gate.
"""

from .token_service import TokenClaims, extract_bearer, issue_token, resolve_caller, verify_credential
from .user_service import UserService


__all__ = [
    "TokenClaims",
    "UserService",
    "extract_bearer",
    "issue_token",
    "resolve_caller",
    "verify_credential",
]
