"""
StarAPI Exception Hierarchy

Defines the exceptions raised by the request executor and the endpoint store.
"""

from typing import Any, Dict, Optional


class StarAPIException(Exception):
    """Base exception for all StarAPI errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class NetworkError(StarAPIException):
    """The transport failed before a response was obtained."""

    pass


class ValidationError(StarAPIException):
    """Caller supplied data that cannot be accepted."""

    pass


class NotFoundError(StarAPIException):
    """Lookup by id found no saved endpoint."""

    pass


class StorageError(StarAPIException):
    """Backing store read or write errors."""

    pass


class ConfigurationError(StarAPIException):
    """Configuration-related errors."""

    pass
