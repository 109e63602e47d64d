"""Error taxonomy raised by application services and mapped to HTTP responses."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors that carry a client-facing message."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    status_code = 400


class UnauthorizedError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"
