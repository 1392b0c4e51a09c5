"""
Base classes and utilities for the service layer.

This module provides the ServiceResult pattern (inspired by Rust's Result type),
the WriteOutcome descriptor returned by every write operation, and the
BaseService class shared by the catalog, booking, moderation, user and checkout
services.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    A result type that encapsulates success or failure from service operations.

    Attributes:
        ok: True if operation succeeded, False otherwise
        value: The success value (present if ok=True)
        error: Error code (present if ok=False)
        error_detail: Human-readable error message (present if ok=False)

    Examples:
        >>> result = container.booking_service().get_by_id(booking_id)
        >>> if not result.ok:
        ...     return error_response(result)
        >>> booking = result.value
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None

    def to_dict(self) -> dict:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary with 'success' and either 'data' or 'error'
        """
        if self.ok:
            return {"success": True, "data": self.value}
        return {
            "success": False,
            "error": {"code": self.error, "message": self.error_detail},
        }


def service_ok(value: T) -> ServiceResult[T]:
    """
    Create a successful ServiceResult.

    Example:
        >>> return service_ok(WriteOutcome.inserted(booking.id))
    """
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "") -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g., "product_not_found", "conflict_or_race")
        error_detail: Human-readable error message

    Example:
        >>> return service_err(ErrorCodes.BOOKING_NOT_FOUND, f"Booking {booking_id} does not exist")
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error)


@dataclass
class WriteOutcome:
    """
    Raw outcome of a write against the store.

    Mirrors the acknowledgement a document store hands back (matched,
    modified, inserted, deleted counts) so callers of the HTTP surface get the
    same shape regardless of which operation produced it.
    """

    acknowledged: bool = True
    matched_count: int = 0
    modified_count: int = 0
    deleted_count: int = 0
    inserted_id: Optional[str] = None
    upserted_id: Optional[str] = None

    @classmethod
    def inserted(cls, inserted_id) -> "WriteOutcome":
        return cls(inserted_id=str(inserted_id))

    @classmethod
    def updated(cls, matched: int, modified: int) -> "WriteOutcome":
        return cls(matched_count=matched, modified_count=modified)

    @classmethod
    def deleted(cls, count: int) -> "WriteOutcome":
        return cls(deleted_count=count)

    def to_dict(self) -> dict:
        data = {
            "acknowledged": self.acknowledged,
            "matchedCount": self.matched_count,
            "modifiedCount": self.modified_count,
            "deletedCount": self.deleted_count,
        }
        if self.inserted_id is not None:
            data["insertedId"] = self.inserted_id
        if self.upserted_id is not None:
            data["upsertedId"] = self.upserted_id
        return data


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator

    Usage:
        class BookingService(BaseService):
            @BaseService.log_performance
            def reserve(self, product_id, booker):
                self.logger.info(f"Reserving product {product_id}")
    """

    def __init__(self):
        """Initialize base service with logger."""
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log performance of service methods.

        Logs execution time and any errors that occur.
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000  # Convert to ms

                # Log based on result type
                if isinstance(result, ServiceResult):
                    if result.ok:
                        self.logger.info(f"{method_name} completed successfully in {elapsed_time:.2f}ms")
                    else:
                        self.logger.warning(
                            f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms"
                        )
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper


class ErrorCodes:
    """Standard error codes used across the marketplace services."""

    # Gate errors
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"

    # Lookup errors
    NOT_FOUND = "not_found"
    PRODUCT_NOT_FOUND = "product_not_found"
    CATEGORY_NOT_FOUND = "category_not_found"
    BOOKING_NOT_FOUND = "booking_not_found"
    USER_NOT_FOUND = "user_not_found"

    # State errors
    CONFLICT_OR_RACE = "conflict_or_race"
    ALREADY_SOLD = "already_sold"
    DUPLICATE_PAYMENT = "duplicate_payment"

    # Upstream errors
    UPSTREAM_FAILURE = "upstream_failure"

    # Validation errors
    VALIDATION_ERROR = "validation_error"

    # Internal errors
    INTERNAL_ERROR = "internal_error"
