"""Domain exceptions.

All catalog-level errors. Each carries a stable ``error_code`` and the
HTTP status the API layer answers with, so services can raise them
without knowing about the transport.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the API layer.
    """

    error_code: str = "CATALOG_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize catalog error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidRequestError(CatalogError):
    """Raised for caller-fixable input problems.

    No side effects have been performed when this is raised.
    """

    error_code = "INVALID_REQUEST"
    status_code = 400


class NotFoundError(CatalogError):
    """Raised when a referenced entity does not exist."""

    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(
        self,
        entity_type: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not found error.

        Args:
            entity_type: Type of the missing entity (e.g., "Product").
            message: Optional message overriding the default.
            details: Optional additional context.
        """
        super().__init__(
            message or f"{entity_type} not found",
            details={"entity_type": entity_type, **(details or {})},
        )


class StorageError(CatalogError):
    """Raised when a write to the catalog store or blob store fails.

    Fatal for the current operation. Any blob written earlier in the
    same operation has already been deleted when this reaches the caller.
    """

    error_code = "STORAGE_ERROR"
    status_code = 500


class ImageDecodeError(CatalogError):
    """Raised when image bytes cannot be decoded.

    Never fatal: callers fall back to the original bytes or to the
    placeholder page.
    """

    error_code = "IMAGE_DECODE_ERROR"
    status_code = 400
