"""Domain errors raised by the services and translated to HTTP responses by the API layer."""


class ShopError(Exception):
    """Base class; `message` is safe to show to the user."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(ShopError):
    status_code = 422


class NotFound(ShopError):
    status_code = 404


class InvalidTransition(ShopError):
    status_code = 409


class ConfirmationRequired(ShopError):
    status_code = 400


class Forbidden(ShopError):
    status_code = 403


class BackendUnavailable(ShopError):
    """A write to the hosted backend did not go through."""

    status_code = 502


class Cancelled(Exception):
    """Raised when a cancellation token is checked after being cancelled."""
