"""
Domain-specific exceptions for the Repository Catalog API.

These exceptions represent request violations detected by the domain layer and
are mapped to HTTP status codes in the API layer.
"""

from typing import Any

INVALID_REPOSITORY_ID = "Invalid repository ID."
INVALID_REQUEST_BODY = "Invalid request body"


class CatalogError(Exception):
    """Base exception for all repository catalog domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class MalformedIdError(CatalogError):
    """
    Raised when a path id is not a syntactically valid UUID.

    Raised before any store lookup, whether or not a record could exist.

    HTTP Status: 400 Bad Request
    """

    pass


class InvalidIdError(CatalogError):
    """
    Raised when a well-formed id does not match any stored repository.

    HTTP Status: 400 Bad Request
    """

    pass


# HTTP Status Code Mapping
ERROR_STATUS_MAP = {
    MalformedIdError: 400,
    InvalidIdError: 400,
}


def get_status_code(error: Exception) -> int:
    """
    Get the HTTP status code for a given exception.

    Args:
        error: The exception instance

    Returns:
        HTTP status code (defaults to 500 for unknown errors)
    """
    return ERROR_STATUS_MAP.get(type(error), 500)
