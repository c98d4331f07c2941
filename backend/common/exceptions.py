"""
Error taxonomy shared by the service layer.

Each error carries the HTTP status and ``error`` code it is rendered with by
``common.exception_handler``. Services raise these without knowing about HTTP.
"""


class ServiceError(Exception):
    """Base class for errors raised deliberately by the service layer."""
    status_code = 500
    error_code = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(ServiceError):
    """Raised when the caller cannot be resolved to a known user."""
    status_code = 401
    error_code = "UNAUTHORIZED"
    default_message = "Authentication required"


class ForbiddenError(ServiceError):
    """Raised when the caller is known but not allowed to act."""
    status_code = 403
    error_code = "FORBIDDEN"
    default_message = "You do not have permission to perform this action"


class NotFoundError(ServiceError):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "Not found"


class InvalidStateError(ServiceError):
    """Raised when a resource is not in the state the operation requires."""
    status_code = 409
    error_code = "INVALID_STATE"
    default_message = "Operation not allowed in the current state"
