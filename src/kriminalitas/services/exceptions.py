"""Errors raised by the service layer and mapped to HTTP responses by the API."""
from typing import Any, Optional


class CrimeDataError(Exception):
    """Base class for failures the API turns into a JSON error body."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationFailedError(CrimeDataError):
    """Required input is missing or malformed."""

    status_code = 400


class NotFoundError(CrimeDataError):
    """The referenced entity does not exist."""

    status_code = 404


class ConflictError(CrimeDataError):
    """A unique constraint rejected the write."""

    status_code = 409


class DuplicateCodeError(ConflictError):
    """Another incident already uses this incident code."""

    def __init__(self, message: str = "Incident code already exists", details: Optional[Any] = None):
        super().__init__(message, details)


class StoreFailureError(CrimeDataError):
    """Any other persistence failure; ``details`` carries the driver message."""

    status_code = 500
