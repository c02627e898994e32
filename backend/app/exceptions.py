"""
Domain error taxonomy.

Every error a service can raise maps to one of these classes. The API layer
renders them through a single exception handler, so callers can always tell
the kinds apart by the ``error`` code in the response body.
"""


class TasktrackError(Exception):
    """Base class for errors raised by the services."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def code(self) -> str:
        return type(self).__name__


class NotFound(TasktrackError):
    """Entity absent, or owned by someone else."""
    status_code = 404


class ConstraintViolation(TasktrackError):
    """Field validation or uniqueness failure."""
    status_code = 422


class InvalidReference(TasktrackError):
    """A referenced category does not exist for this owner."""
    status_code = 400


class InvalidOperation(TasktrackError):
    """The operation breaks a business rule."""
    status_code = 409


class Unauthenticated(TasktrackError):
    """No owner identity could be resolved from the request."""
    status_code = 401
