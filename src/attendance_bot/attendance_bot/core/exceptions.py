class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StudentNotFoundError(DomainError):
    """Raised when no student is registered for a phone number."""


class ScheduleNotFoundError(DomainError):
    """Raised when attendance or a summary is requested before any schedule exists."""


class ExternalServiceError(DomainError):
    """Raised when the AI service fails, times out or returns unusable output."""
