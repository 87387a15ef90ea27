"""Service-level exceptions mapped to HTTP responses in main."""


class ServiceError(Exception):
    """Base error raised by service functions."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailedError(ServiceError):
    status_code = 400


class PermissionDeniedError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404
