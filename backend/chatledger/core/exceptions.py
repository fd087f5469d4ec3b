"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class ChatLedgerError(Exception):
    """Base exception for chatledger."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(ChatLedgerError):
    """Resource not found (or not owned by the caller)."""

    pass


class ValidationError(ChatLedgerError):
    """Missing or empty required argument."""

    pass


class AuthenticationError(ChatLedgerError):
    """Authentication failed."""

    pass


class InfrastructureError(ChatLedgerError):
    """Infrastructure-related error (DB, external services, etc.)."""

    pass


class StorageError(InfrastructureError):
    """Persistence layer failure."""

    pass
