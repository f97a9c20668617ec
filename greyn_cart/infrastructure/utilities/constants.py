"""
Application constants for the Greyn Eco cart service

Centralizes the magic numbers and hard-coded strings used across layers.
"""

from decimal import Decimal
from typing import Final


# Connection timeout settings
class RetrySettings:
    """Configuration for timeouts"""

    CONNECTION_TIMEOUT_SECONDS: Final[int] = 30


# Database configuration constants
class DatabaseSettings:
    """Database connection and pool configuration"""

    POOL_RECYCLE_SECONDS: Final[int] = 3600  # 1 hour

    # Production settings
    PRODUCTION_POOL_SIZE: Final[int] = 20
    PRODUCTION_MAX_OVERFLOW: Final[int] = 30

    # Development settings
    DEVELOPMENT_POOL_SIZE: Final[int] = 5
    DEVELOPMENT_MAX_OVERFLOW: Final[int] = 10

    SLOW_QUERY_THRESHOLD_MS: Final[int] = 1000


# Logging configuration constants
class LoggingSettings:
    """Logging file sizes and rotation settings"""

    MAX_LOG_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10MB
    MAIN_LOG_BACKUP_COUNT: Final[int] = 10
    ERROR_LOG_BACKUP_COUNT: Final[int] = 10

    MAIN_LOG_FILE: Final[str] = "greyn_cart.json.log"
    ERROR_LOG_FILE: Final[str] = "errors.json.log"


# Cart business rules
class CartSettings:
    """Cart limits, tax and persisted layout"""

    MAX_QUANTITY_PER_ITEM: Final[int] = 10000
    MIN_QUANTITY_PER_ITEM: Final[int] = 1
    TAX_RATE: Final[Decimal] = Decimal("0.05")  # 5% estimated tax
    DEFAULT_CURRENCY: Final[str] = "USD"

    DEFAULT_STORAGE_KEY: Final[str] = "carbonCart"
    STORAGE_KEY_PATTERN: Final[str] = r"^[A-Za-z0-9_.-]{1,64}$"

    # Persisted blob layout
    SCHEMA_VERSION: Final[int] = 2
    LEGACY_SCHEMA_VERSION: Final[int] = 1


# Catalog browsing
class CatalogSettings:
    """Marketplace filter sentinels"""

    ALL_COUNTRIES: Final[str] = "All Countries"
    ALL_CATEGORIES: Final[str] = "All Categories"


# Error codes and messages
class ErrorCodes:
    """Standardized error codes and messages"""

    GENERAL_ERROR: Final[str] = "GENERAL_ERROR"
    DATABASE_ERROR: Final[str] = "DATABASE_ERROR"
    STORAGE_ERROR: Final[str] = "STORAGE_ERROR"
    VALIDATION_ERROR: Final[str] = "VALIDATION_ERROR"
    BUSINESS_ERROR: Final[str] = "BUSINESS_ERROR"
    PROJECT_NOT_FOUND: Final[str] = "PROJECT_NOT_FOUND"
    PROJECT_UNAVAILABLE: Final[str] = "PROJECT_UNAVAILABLE"
    CART_ITEM_NOT_FOUND: Final[str] = "CART_ITEM_NOT_FOUND"
    CART_CONFLICT: Final[str] = "CART_CONFLICT"
    CONFIRMATION_REQUIRED: Final[str] = "CONFIRMATION_REQUIRED"

    # User-friendly messages
    GENERIC_ERROR_MESSAGE: Final[str] = "An error occurred. Please try again."
    DATABASE_ERROR_MESSAGE: Final[
        str
    ] = "Sorry, there was a problem with our system. Please try again in a moment."
    STORAGE_ERROR_MESSAGE: Final[str] = "Your cart could not be saved. Please try again."
    CONFLICT_MESSAGE: Final[
        str
    ] = "Your cart was changed somewhere else. Please reload it and try again."


class CheckoutIssueCodes:
    """Reasons a cart line blocks checkout"""

    EMPTY_CART: Final[str] = "EMPTY_CART"
    UNAVAILABLE: Final[str] = "UNAVAILABLE"
    PRICE_CHANGED: Final[str] = "PRICE_CHANGED"
    EXCEEDS_SUPPLY: Final[str] = "EXCEEDS_SUPPLY"
