"""
Domain errors raised by services and translated to HTTP responses in main.
"""
from typing import Any


class EzSplitError(Exception):
    """Base class for errors reported back to the caller."""
    status_code = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(EzSplitError):
    """Referenced expense, user or record does not exist."""
    status_code = 404


class ValidationError(EzSplitError):
    """Missing or malformed input on a write path. Nothing is written."""
    status_code = 400


class StoreError(EzSplitError):
    """The underlying data store failed; the request is aborted."""
    status_code = 500
