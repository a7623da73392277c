# Domain errors raised by the services.
# Each one carries the HTTP status it maps to; app.main registers a single
# handler that turns them into {"detail": message} JSON responses.

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """A required field is missing or blank"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidReactionKind(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid reaction emoji"


class DuplicateUsername(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Username already exists"


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid username or password"


class StorageFailure(AppError):
    """Database or media backend fault"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Storage failure"
