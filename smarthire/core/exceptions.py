"""
Error taxonomy for the SmartHire core.

Every error carries a ``kind`` that callers can map to a response
(validation, not_found, conflict, authorization) and a readable message.
"""

from typing import Any, Optional


class SmartHireError(Exception):
    """Base class for all errors raised by the workflow and matching core."""

    kind: str = "error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Serializable form for CLI output and logging."""
        return {"kind": self.kind, "message": self.message, **self.context}


class ValidationError(SmartHireError):
    """Malformed input or an illegal workflow request."""

    kind = "validation"


class InvalidTransitionError(ValidationError):
    """Raised when a stage change is not allowed by the transition table."""

    def __init__(self, current: Any, requested: Any) -> None:
        current_value = getattr(current, "value", current)
        requested_value = getattr(requested, "value", requested)
        super().__init__(
            f"Invalid transition from {current_value} to {requested_value}",
            current=current_value,
            requested=requested_value,
        )
        self.current = current_value
        self.requested = requested_value


class NotFoundError(SmartHireError):
    """Referenced job, application or user does not exist."""

    kind = "not_found"

    def __init__(self, resource: str, identifier: Any) -> None:
        super().__init__(
            f"{resource.capitalize()} not found: {identifier}",
            resource=resource,
            identifier=str(identifier),
        )
        self.resource = resource
        self.identifier = str(identifier)


class ConflictError(SmartHireError):
    """Duplicate application or a concurrent modification."""

    kind = "conflict"


class AuthorizationError(SmartHireError):
    """Actor lacks the role required for an operation."""

    kind = "authorization"

    def __init__(self, message: str, role: Optional[str] = None) -> None:
        super().__init__(message, role=role)
        self.role = role
