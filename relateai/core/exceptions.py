"""
Custom exceptions for the RelateAI API.
Provides consistent error handling across the application.

Every exception carries the HTTP status it maps to; the handlers registered
in ``relateai.main`` render them as ``{"success": false, "message": ...}``.
"""
from typing import List, Optional

from fastapi import status


class AppError(Exception):
    """Base exception for RelateAI"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(AppError):
    """Resource not found"""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "Resource", resource_id: str = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(message)


class AlreadyExistsError(AppError):
    """Resource already exists"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, resource: str = "Resource", field: str = None, value: str = None):
        if field and value:
            message = f"{resource} with {field} '{value}' already exists"
        else:
            message = f"{resource} already exists"
        super().__init__(message)


class BadRequestError(AppError):
    """Request is well-formed but not allowed in the current state"""
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(AppError):
    """Authentication failed"""
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class ForbiddenError(AppError):
    """Access denied"""
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "You don't have permission to access this resource"):
        super().__init__(message)


class TooManyRequestsError(AppError):
    """Rate limit exceeded"""
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str = "Too many requests, please try again later"):
        super().__init__(message)


class ExternalServiceError(AppError):
    """External service call failed"""
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, service: str = "External service", message: str = None):
        msg = f"{service} call failed"
        if message:
            msg = f"{msg}: {message}"
        super().__init__(msg)


class RequestValidationFailed(AppError):
    """Request segment did not match its schema"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: List[dict], message: str = "Validation error"):
        self.errors = errors
        super().__init__(message)


class ValidationFault(AppError):
    """Validation could not run at all (malformed payload, unexpected error)"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error: str):
        self.error = error
        super().__init__("Internal server error during validation")


# Raise helpers
def raise_not_found(resource: str = "Resource", resource_id: Optional[str] = None):
    """Raise 404"""
    raise NotFoundError(resource, resource_id)


def raise_already_exists(resource: str = "Resource", field: str = None, value: str = None):
    """Raise 400 for duplicate"""
    raise AlreadyExistsError(resource, field, value)


def raise_bad_request(message: str):
    """Raise 400"""
    raise BadRequestError(message)


def raise_unauthorized(message: str = "Could not validate credentials"):
    """Raise 401"""
    raise UnauthorizedError(message)
