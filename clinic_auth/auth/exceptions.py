"""
Authentication-specific exceptions.
"""
from fastapi import status

from ..exceptions import AppException


class AuthException(AppException):
    """Base class for authentication and account lifecycle exceptions."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)


class ValidationError(AuthException):
    """Exception raised when input is missing or malformed. Nothing was changed."""
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictError(AuthException):
    """Exception raised when a unique value is already taken."""
    def __init__(self, detail: str = "User already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class AuthenticationError(AuthException):
    """Exception raised when credentials are invalid, whichever field was wrong."""
    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class PermissionDeniedError(AuthException):
    """Exception raised when the caller's role is not allowed."""
    def __init__(self, detail: str = "Permission denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(AuthException):
    """Exception raised when an id-based lookup misses."""
    def __init__(self, detail: str = "User not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InternalError(AuthException):
    """Exception raised for unexpected store or primitive failures."""
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
