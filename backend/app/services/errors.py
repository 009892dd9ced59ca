"""Service-level error taxonomy.

These exceptions know nothing about HTTP. ``app.api.errors`` maps each one
to a status code at the request boundary.
"""


class ServiceError(Exception):
    """Base class for all service-level errors."""

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ConfigError(ServiceError):
    """Required configuration is missing or unusable. Fatal at startup."""


class ValidationError(ServiceError):
    """Input passed schema validation but breaks a business rule."""


class UnauthorizedError(ServiceError):
    """Any credential or token problem.

    Callers are not told which check failed.
    """

    def __init__(self, message: str = "Unauthorized", errors: dict[str, list[str]] | None = None):
        super().__init__(message, errors)


class ConflictError(ServiceError):
    """The request collides with existing state (e.g. duplicate email)."""


class NotFoundError(ServiceError):
    """The requested resource does not exist."""
