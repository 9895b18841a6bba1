"""
Exception hierarchy for the chat relay.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging, plus a
stable machine-readable code that is sent to clients in error events.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class ChatRelayException(Exception):
    """Base exception for all chat relay errors."""

    code = "RELAY_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ChatRelayException):
    """Raised when a request or event payload is missing or malformed."""

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(ChatRelayException):
    """Raised when a message or file cannot be found."""

    code = "NOT_FOUND"

    def __init__(
        self,
        resource: str,
        resource_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["resource"] = resource
        details["id"] = resource_id
        super().__init__(f"{resource.capitalize()} not found: {resource_id}", details)


class PermissionDeniedError(ChatRelayException):
    """Raised when a requester does not own the resource it tries to delete."""

    code = "PERMISSION_DENIED"

    def __init__(
        self,
        message: str,
        requester_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if requester_id:
            details["requester_id"] = requester_id
        super().__init__(message, details)


class PersistenceError(ChatRelayException):
    """Raised when the message store or blob store is unavailable or a write fails."""

    code = "PERSISTENCE_ERROR"

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize persistence error.

        Args:
            message: Error message
            operation: Operation that failed (create, delete, sweep, upload)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class ProviderError(ChatRelayException):
    """Raised when a single translation or tone provider fails."""

    code = "PROVIDER_ERROR"

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if provider:
            details["provider"] = provider
        super().__init__(message, details)


class AllProvidersFailedError(ChatRelayException):
    """Raised when every configured translation provider failed."""

    code = "TRANSLATION_FAILED"

    def __init__(self, failures: dict[str, str]) -> None:
        """
        Initialize exhausted-chain error.

        Args:
            failures: Provider name mapped to the reason it failed
        """
        super().__init__("Translation failed on all providers", {"failures": failures})


class UnknownEventError(ValidationError):
    """Raised when a client frame names an event the relay does not handle."""

    code = "UNKNOWN_EVENT"

    def __init__(self, event: Any) -> None:
        super().__init__(f"Unknown event type: {event}", field="event", details={"event": event})
