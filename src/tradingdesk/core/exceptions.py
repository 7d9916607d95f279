"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class UpstreamUnavailableError(AppError):
    """
    Raised when the upstream quote provider cannot serve a request.

    Covers timeouts, connection failures, rate-limit notices and empty or
    malformed bodies. The market data gateway absorbs it and falls back to
    synthetic data; it never reaches route handlers.
    """

    def __init__(self, message: str):
        super().__init__(message, code="UPSTREAM_UNAVAILABLE")
