"""Typed failures raised by the service layer.

Each error carries a machine readable ``code`` and a ``message`` that is
safe to show to the donor. ``app.main`` translates them into HTTP responses
shaped like the ``HTTPException`` details raised by the routes.
"""

GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."


class ServiceError(Exception):
    status_code = 500

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(ServiceError):
    """Missing or malformed input."""

    status_code = 400


class NotFoundError(ServiceError):
    """A referenced child, department, donation or backup does not exist."""

    status_code = 404


class ConflictError(ServiceError):
    """The child was assigned to another donor first."""

    status_code = 409


class TransientError(ServiceError):
    """The data store failed or timed out; the caller may try again."""

    status_code = 503

    def __init__(self, code: str = "try_again", message: str = GENERIC_FAILURE_MESSAGE):
        super().__init__(code, message)
