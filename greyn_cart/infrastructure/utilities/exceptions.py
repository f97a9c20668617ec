"""
Custom exceptions for the Greyn Eco cart service
"""

import logging
from typing import Optional

from greyn_cart.infrastructure.utilities.constants import ErrorCodes

logger = logging.getLogger(__name__)


class GreynEcoError(Exception):
    """Base exception for the cart service"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message)
        self.user_message = user_message or ErrorCodes.GENERIC_ERROR_MESSAGE
        self.error_code = error_code or ErrorCodes.GENERAL_ERROR


class DatabaseError(GreynEcoError):
    """Database-related errors"""

    def __init__(self, message: str, operation: str = None):
        super().__init__(
            message,
            ErrorCodes.DATABASE_ERROR_MESSAGE,
            ErrorCodes.DATABASE_ERROR,
        )
        self.operation = operation


class CartStorageError(GreynEcoError):
    """Persisting a cart failed (disk full, database down, ...)"""

    def __init__(self, message: str, storage_key: str = None):
        super().__init__(
            message, ErrorCodes.STORAGE_ERROR_MESSAGE, ErrorCodes.STORAGE_ERROR
        )
        self.storage_key = storage_key


class ValidationError(GreynEcoError):
    """Input validation errors"""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message, message, ErrorCodes.VALIDATION_ERROR  # Validation errors are user-friendly
        )
        self.field = field


class BusinessLogicError(GreynEcoError):
    """Business rule violations"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(
            message, user_message or message, error_code or ErrorCodes.BUSINESS_ERROR
        )


class ProjectNotFoundError(BusinessLogicError):
    """Project is not in the catalog"""

    def __init__(self, project_id: str):
        super().__init__(
            f"Project not found: {project_id}",
            f"Project {project_id} is not available in the marketplace.",
            ErrorCodes.PROJECT_NOT_FOUND,
        )
        self.project_id = project_id


class ProjectUnavailableError(BusinessLogicError):
    """Project exists but is no longer offered"""

    def __init__(self, project_id: str):
        super().__init__(
            f"Project inactive: {project_id}",
            "This project is currently unavailable.",
            ErrorCodes.PROJECT_UNAVAILABLE,
        )
        self.project_id = project_id


class CartItemNotFoundError(BusinessLogicError):
    """Line item is not in the cart"""

    def __init__(self, item_id: str):
        super().__init__(
            f"Cart item not found: {item_id}",
            "That project is not in your cart.",
            ErrorCodes.CART_ITEM_NOT_FOUND,
        )
        self.item_id = item_id


class CartConflictError(BusinessLogicError):
    """Stored cart version moved on since it was read"""

    def __init__(
        self,
        storage_key: str,
        expected_version: int,
        actual_version: Optional[int] = None,
    ):
        super().__init__(
            f"Cart {storage_key} version conflict: expected {expected_version}, "
            f"found {actual_version}",
            ErrorCodes.CONFLICT_MESSAGE,
            ErrorCodes.CART_CONFLICT,
        )
        self.storage_key = storage_key
        self.expected_version = expected_version
        self.actual_version = actual_version


def validate_and_raise(condition: bool, error_class: type, *args, **kwargs):
    """Helper function to validate condition and raise specific error"""
    if not condition:
        raise error_class(*args, **kwargs)
