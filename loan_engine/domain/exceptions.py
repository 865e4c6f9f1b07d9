"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input is missing or outside its allowed bounds.

    Raised before any computation starts, so callers never see a partial
    schedule. ``field`` names the offending input.
    """

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class InvalidTransitionError(DomainException):
    """Application status transition is not allowed"""

    pass
