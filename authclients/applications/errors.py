"""
authclients.applications.errors
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Errors raised by the application manager.
"""

from authclients.errors import AuthClientsError

__all__ = [
    "PreconditionError",
    "ValidationError",
    "InvalidStateError",
]


class PreconditionError(AuthClientsError, ValueError):
    """A required argument was ``None`` or empty."""

    error = "invalid_argument"

    def __init__(self, description=None, argument=None):
        self.argument = argument
        super().__init__(description=description)


class ValidationError(AuthClientsError):
    """The application failed validation and was not persisted.

    ``violation`` holds the first reported problem and ``violations``
    every problem reported by the validator.
    """

    error = "invalid_application"

    def __init__(self, violations, application=None):
        self.violations = list(violations)
        self.violation = self.violations[0] if self.violations else None
        self.application = application
        description = self.violation.description if self.violation else None
        super().__init__(description=description)


class InvalidStateError(AuthClientsError):
    """A stored or supplied value is not supported by the manager."""

    error = "invalid_state"
