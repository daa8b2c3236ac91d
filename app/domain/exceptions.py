"""Domain exceptions for the catalog and order backend.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. A presentation
layer maps them to HTTP responses using message, error_code and details.
"""

from typing import Any


class CatalogOrderException(Exception):
    """Base exception for all catalog/order application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(CatalogOrderException):
    """Raised when input validation fails (e.g. invalid currency or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(CatalogOrderException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'item', 'order').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ItemDeletedException(CatalogOrderException):
    """Raised when an order references a soft-deleted item."""

    def __init__(self, item_id: str) -> None:
        super().__init__(
            f"Item with ID {item_id} is deleted",
            "ITEM_DELETED",
            {"item_id": item_id},
        )


class CurrencyMismatchException(CatalogOrderException):
    """Raised when an order line's item currency differs from the order currency."""

    def __init__(self, item_id: str, item_currency: str, order_currency: str) -> None:
        """Initialize with the offending item and both currencies.

        Args:
            item_id: Item whose currency does not match.
            item_currency: Currency of the item.
            order_currency: Currency requested for the order.
        """
        super().__init__(
            f"Item with ID {item_id} has currency {item_currency} but order currency "
            f"is {order_currency}. All items must have the same currency.",
            "CURRENCY_MISMATCH",
            {
                "item_id": item_id,
                "item_currency": item_currency,
                "order_currency": order_currency,
            },
        )


class SequenceGenerationError(CatalogOrderException):
    """Raised when the next order number cannot be derived safely.

    Covers store failures and stored order numbers that do not parse. Fatal
    to the current order-creation attempt; never retried with a guess.
    """

    def __init__(self, message: str, prefix: str | None = None) -> None:
        details = {"prefix": prefix} if prefix else {}
        super().__init__(message, "SEQUENCE_GENERATION_ERROR", details)


class DuplicateOrderNumberException(CatalogOrderException):
    """Raised when the order number unique constraint rejects an insert."""

    def __init__(self, order_number: str) -> None:
        super().__init__(
            f"Order number already exists: {order_number}",
            "DUPLICATE_ORDER_NUMBER",
            {"order_number": order_number},
        )


class SqlNotConfiguredException(CatalogOrderException):
    """Raised when an operation requires the SQL database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
