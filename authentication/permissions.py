from __future__ import annotations

from typing import Iterable

from rest_framework.permissions import BasePermission

from utils.rbac import ROLE_ADMIN, ROLE_SELLER, check_role


class RoleRequired(BasePermission):
    """Base permission that enforces required roles after DB re-validation."""

    required_roles: Iterable[str] = ()
    message = "Insufficient role to access this resource."

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if user is None or not getattr(user, "is_authenticated", False):
            return False

        required = tuple(self.required_roles)
        if not required:
            return True
        return check_role(user, required).ok

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


class SellerRequired(RoleRequired):
    required_roles = (ROLE_SELLER, ROLE_ADMIN)


class AdminRequired(RoleRequired):
    required_roles = (ROLE_ADMIN,)
