"""Identifier validators shared by dependencies and tests."""

import re

from catalog.core.errors import INVALID_REPOSITORY_ID, MalformedIdError

# Canonical 8-4-4-4-12 form, version 1-5, RFC 4122 variant, or the nil UUID
UUID_PATTERN = re.compile(
    r"^(?:[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}"
    r"|00000000-0000-0000-0000-000000000000)$",
    re.IGNORECASE,
)


def is_uuid(value: object) -> bool:
    """Return True when value is a string in canonical UUID form."""
    return isinstance(value, str) and UUID_PATTERN.match(value) is not None


def validate_repository_id(value: str) -> str:
    """
    Validate that a repository id is a properly formatted UUID.

    Args:
        value: Raw id taken from the request path

    Returns:
        The validated id, unchanged

    Raises:
        MalformedIdError: If the value is not in UUID format
    """
    if not is_uuid(value):
        raise MalformedIdError(INVALID_REPOSITORY_ID, details={"id": value})

    return value
