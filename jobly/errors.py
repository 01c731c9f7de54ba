"""
Error hierarchy for Jobly.

Every error carries the HTTP status the web layer should answer with; the
data layer itself never deals with transport concerns.
"""

from typing import Any, Dict, Optional


class JoblyError(Exception):
    """Base class for all errors raised by Jobly."""

    status = 500

    def __init__(self, message: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class BadRequestError(JoblyError):
    """Client sent something we cannot act on."""

    status = 400

    def __init__(self, message: str = "Bad Request", status: Optional[int] = None):
        super().__init__(message, status)


class UnauthorizedError(JoblyError):
    status = 401

    def __init__(self, message: str = "Unauthorized", status: Optional[int] = None):
        super().__init__(message, status)


class ForbiddenError(JoblyError):
    status = 403

    def __init__(self, message: str = "Forbidden", status: Optional[int] = None):
        super().__init__(message, status)


class NotFoundError(JoblyError):
    """Requested row does not exist."""

    status = 404

    def __init__(self, message: str = "Not Found", status: Optional[int] = None):
        super().__init__(message, status)


class InvalidArgument(BadRequestError):
    """Raised by the SQL fragment builders for unusable input."""


def to_response(err: JoblyError) -> Dict[str, Any]:
    """
    Render an error the way the web layer returns it.

    Args:
        err: Any JoblyError

    Returns:
        {"error": {"message": ..., "status": ...}}
    """
    return {"error": {"message": err.message, "status": err.status}}
