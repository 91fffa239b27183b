class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class OutOfOrderEventError(ValidationError):
    """Raised when a check event does not follow the record's current state."""


class DayCompletedError(ValidationError):
    """Raised when a check-in arrives for a day whose attendance is completed."""


class ReferentialIntegrityError(DomainError):
    """Raised when a write references an employee that does not exist."""


class MalformedScheduleError(DomainError):
    """Raised by schedule parsers for unparsable times or shift patterns.

    Never escapes the roster resolver: it is logged and degrades to zero metrics.
    """
