import logging
from typing import Iterable

from django.contrib.auth import get_user_model

from authentication.domain.exceptions import Forbidden, Unauthenticated
from marketplace.services.base import ErrorCodes, ServiceResult, service_err, service_ok

# Canonical role names
ROLE_BUYER = "buyer"
ROLE_SELLER = "seller"
ROLE_ADMIN = "admin"

logger = logging.getLogger(__name__)


def _fetch_user_from_db(user):
    """Fetch a fresh copy of the user from the DB with only the fields we need.

    Falls back to None if user is not authenticated or no longer exists.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    User = get_user_model()
    # Only load minimal fields required for RBAC checks
    return User.objects.only("id", "email", "role", "is_superuser").filter(email=getattr(user, "email", None)).first()


def resolve_role(user) -> str | None:
    """Return the role persisted for ``user``, ignoring whatever the token claimed."""
    db_user = _fetch_user_from_db(user)
    if db_user is None:
        return None
    if db_user.is_superuser:
        return ROLE_ADMIN
    return db_user.role


def check_role(user, roles: Iterable[str]) -> ServiceResult[None]:
    """Capability check: ok when the caller's persisted role is one of ``roles``."""
    roles = list(roles)
    if user is None or not getattr(user, "is_authenticated", False):
        return service_err(ErrorCodes.UNAUTHENTICATED, "Authentication credentials were not provided.")

    role = resolve_role(user)
    if role not in roles:
        logger.warning(
            "RBAC denial: user_id=%s role=%s required=%s",
            getattr(user, "id", None),
            role,
            roles,
        )
        return service_err(ErrorCodes.FORBIDDEN, "Insufficient role to access this resource.")
    return service_ok(None)


def require_role(user, roles: Iterable[str]):
    """Raise Forbidden unless the user has one of the roles."""
    result = check_role(user, roles)
    if result.error == ErrorCodes.UNAUTHENTICATED:
        raise Unauthenticated(result.error_detail)
    if not result.ok:
        raise Forbidden(result.error_detail)

