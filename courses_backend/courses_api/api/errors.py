"""
API error taxonomy.

Handlers and dependencies raise these; main.py renders every ApiError with a
single exception handler, so the status code and body shape live here.
"""

from typing import List, Optional


class ApiError(Exception):
    """Base class for errors that map onto a client-facing response."""

    status_code = 500
    headers: Optional[dict] = None

    def body(self) -> dict:
        return {"message": "Internal Server Error"}


# PUBLIC_INTERFACE
class ValidationError(ApiError):
    """One or more submitted fields are missing or invalid."""

    status_code = 400

    def __init__(self, messages: List[str]):
        super().__init__("; ".join(messages))
        self.messages = list(messages)

    def body(self) -> dict:
        return {"errors": self.messages}


# PUBLIC_INTERFACE
class ConflictError(ApiError):
    """A unique field is already taken."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def body(self) -> dict:
        return {"message": self.message}


# PUBLIC_INTERFACE
class AuthenticationError(ApiError):
    """
    Credentials are missing, malformed, unknown or wrong.

    `reason` is for the server log only; the response body is the same for
    every failure.
    """

    status_code = 401
    headers = {"WWW-Authenticate": "Basic"}

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def body(self) -> dict:
        return {"message": "Access Denied"}


# PUBLIC_INTERFACE
class NotFoundError(ApiError):
    """The referenced record does not exist."""

    status_code = 404

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def body(self) -> dict:
        return {"message": self.message}
