"""
Typed errors raised by the service layer.

Each error carries the HTTP status it maps to; the handlers in
``core.exception_handlers`` turn them into the JSON envelope.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class NotFoundError(AppError):
    # also used for rows owned by another tenant
    status_code = 404


class ConflictError(AppError):
    status_code = 400


class ForbiddenError(AppError):
    status_code = 403


class InternalError(AppError):
    status_code = 500

    def __init__(self, message: str = "Server Error"):
        super().__init__(message)
