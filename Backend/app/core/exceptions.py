"""
Application error types.

Services raise these; app.main turns them into the
{"success": false, "message": ...} envelope with the matching status code.
"""
from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateError(ValidationError):
    pass


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConfigurationError(AppError):
    """A required external dependency (gateway keys etc.) is not configured."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class PaymentVerificationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class PaymentGatewayError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
