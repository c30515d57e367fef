"""Error types raised by the catalog core."""
from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base class for catalog errors."""

    status_code = 500
    error_code = "catalog_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(CatalogError):
    """A required field is missing or a value is invalid."""

    status_code = 422
    error_code = "validation_error"


class AuthorizationError(CatalogError):
    """The policy denied the action for the given actor."""

    status_code = 403
    error_code = "forbidden"


class NotFoundError(CatalogError):
    """The referenced record does not exist."""

    status_code = 404
    error_code = "not_found"


class StorageError(CatalogError):
    """The underlying store failed. Not retried here."""

    status_code = 503
    error_code = "storage_error"
