"""
UserService - user registry keyed on email.

Users are written through an upsert: the first call for an email creates the
account, later calls update its profile fields.
"""

from typing import Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, WriteOutcome, service_err, service_ok
from utils.logging_utils import mask_value
from utils.rbac import ROLE_BUYER, ROLE_SELLER

User = get_user_model()

SELF_ASSIGNABLE_ROLES = (ROLE_BUYER, ROLE_SELLER)


class UserService(BaseService):
    """
    Service for user accounts.

    Responsibilities:
    - Create or update a user by email
    - Answer role lookups for the frontend
    """

    @BaseService.log_performance
    def upsert_user(
        self,
        email: str,
        name: Optional[str] = None,
        role: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> ServiceResult[WriteOutcome]:
        """
        Create the user if absent, update it if present.

        The admin role can never be self-assigned, and an existing admin keeps
        its role whatever the payload says.

        Returns:
            ServiceResult with WriteOutcome (upsertedId on create,
            matched/modified counts on update)
        """
        if not email:
            return service_err(ErrorCodes.VALIDATION_ERROR, "email is required")
        if role is not None and role not in SELF_ASSIGNABLE_ROLES:
            return service_err(ErrorCodes.VALIDATION_ERROR, f"role must be one of {list(SELF_ASSIGNABLE_ROLES)}")

        email = User.objects.normalize_email(email)

        with transaction.atomic():
            user = User.objects.select_for_update().filter(email=email).first()

            if user is None:
                try:
                    with transaction.atomic():
                        user = User.objects.create_user(
                            username=email,
                            email=email,
                            password=None,
                            name=name or "",
                            role=role or ROLE_BUYER,
                            photo_url=photo_url or "",
                        )
                    self.logger.info(f"Created user {mask_value(email)} with role {user.role}")
                    return service_ok(WriteOutcome(upserted_id=str(user.id)))
                except IntegrityError:
                    # Lost the race against a concurrent create; update the winner instead
                    self.logger.info(f"Concurrent create for {mask_value(email)}, updating existing row")
                    user = User.objects.select_for_update().get(email=email)

            changed = []
            if name is not None and user.name != name:
                user.name = name
                changed.append("name")
            if photo_url is not None and user.photo_url != photo_url:
                user.photo_url = photo_url
                changed.append("photo_url")
            if role is not None and not user.is_admin() and user.role != role:
                user.role = role
                changed.append("role")

            if changed:
                user.save(update_fields=changed)

        return service_ok(WriteOutcome.updated(matched=1, modified=1 if changed else 0))

    @BaseService.log_performance
    def get_role(self, email: str) -> ServiceResult[dict]:
        """
        Report which role the account behind ``email`` holds.

        Unknown emails answer with every flag false rather than an error.
        """
        user = User.objects.filter(email=email).only("role", "is_superuser").first()
        role = None
        if user is not None:
            role = "admin" if user.is_admin() else user.role
        return service_ok(
            {
                "role": role,
                "isAdmin": role == "admin",
                "isSeller": role == ROLE_SELLER,
                "isBuyer": role == ROLE_BUYER,
            }
        )

    def get_by_email(self, email: str) -> ServiceResult:
        user = User.objects.filter(email=email).first()
        if user is None:
            return service_err(ErrorCodes.USER_NOT_FOUND, f"No user registered for {mask_value(email)}")
        return service_ok(user)
