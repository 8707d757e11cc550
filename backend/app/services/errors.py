"""
Errors raised between the categorization tiers.

The engine converts every one of these into a well-formed result; only the
correction learner lets StorageUnavailable escape, and only for the audit table.
"""

from typing import Optional

from sqlalchemy.exc import DBAPIError


class CategorizationError(Exception):
    """Base class for categorization failures."""


class AdapterNotConfigured(CategorizationError):
    """A model adapter is missing its URL or API key."""


class AdapterTimeout(CategorizationError):
    """A model adapter did not answer before its deadline."""


class UpstreamError(CategorizationError):
    """A model adapter answered with a non-success status or unusable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class StorageUnavailable(CategorizationError):
    """A table the engine needs has not been provisioned yet."""


def is_missing_table_error(exc: BaseException) -> bool:
    """Check whether a database error means the table is not provisioned."""
    if not isinstance(exc, DBAPIError):
        return False
    orig = exc.orig
    message = f"{type(orig).__name__} {orig}".lower()

    if "no such table" in message or "undefinedtable" in message:
        return True
    if "relation" in message and "does not exist" in message and "column" not in message:
        return True
    return "table" in message and "doesn't exist" in message
