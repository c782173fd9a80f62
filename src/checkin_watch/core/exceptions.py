from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "DOMAIN_ERROR"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Raised when a record does not exist for the requesting tenant."""

    code = "NOT_FOUND"


class InvalidTransitionError(DomainError):
    """Raised when a status change is not allowed from the current status."""

    code = "INVALID_TRANSITION"

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot transition from {current.value} to {requested.value}")
