"""
Exception types.

Domain errors are plain ValueErrors raised by the physiological model and
calculators; nothing HTTP-specific leaks into them. API errors carry a
status and a machine-readable error_code that main.py renders as
{"detail": ..., "error_code": ...}.
"""
from fastapi import HTTPException, status
from typing import Any, Dict, Optional


class DomainValidationError(ValueError):
    """A value breaks an invariant of the physical profile or zone model."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class OutOfRangeError(DomainValidationError):
    """A value falls outside its allowed range."""


class APIException(HTTPException):
    """HTTP error with a stable error_code. Subclasses set the class defaults."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(status_code=status_code or type(self).status_code, detail=detail, headers=headers)
        self.error_code = error_code or type(self).error_code


class NotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found for user {identifier}")


class ValidationError(APIException):
    """Request is well-formed but its values do not make sense together."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(detail, error_code=f"VALIDATION_ERROR_{field.upper()}" if field else None)


class UnauthorizedError(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})
