"""
Workflow errors.

Every expected failure of a submission operation is one of these. They are
raised by the services and rendered by the exception handler in
``fpams.main`` as::

    {"error": "Locked", "code": "LOCKED", "message": "..."}
"""


class WorkflowError(Exception):
    """Base class for recoverable workflow errors"""
    status_code: int = 400
    code: str = "WORKFLOW_ERROR"
    default_message: str = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(WorkflowError):
    """No (valid) actor identity on the request."""
    status_code = 401
    code = "AUTH_REQUIRED"
    default_message = "Authentication required"


class Forbidden(WorkflowError):
    """
    Actor may not perform this action on this submission.

    Examples:
    - faculty editing someone else's activity
    - HOD validating a submission from another department
    - coordinator touching a category outside the allowlist
    """
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Access forbidden"


class InvalidState(WorkflowError):
    """Action is not legal from the submission's current status."""
    status_code = 409
    code = "INVALID_STATE"
    default_message = "Action not allowed in the current state"


class Locked(WorkflowError):
    """Submission is locked by the Principal."""
    status_code = 423
    code = "LOCKED"
    default_message = "This submission has been locked by the Principal"


class ValidationError(WorkflowError):
    """A required field is missing or a value is out of range."""
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class NotFound(WorkflowError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"
