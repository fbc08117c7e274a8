"""Failure taxonomy for calls to the admin service."""


class GatewayError(Exception):
    """A failed admin call, carrying the normalized user-facing message."""

    def __init__(self, message: str, status_code: int | None = None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code  # None when no response was received
        self.payload = payload


class AuthError(GatewayError):
    """Credential missing or rejected (401/403)."""


class ValidationError(GatewayError):
    """The service rejected a submitted value (400/409/422)."""


class NetworkError(GatewayError):
    """No response received from the service."""


AUTH_STATUSES = {401, 403}
VALIDATION_STATUSES = {400, 409, 422}


def error_for_status(status_code: int) -> type[GatewayError]:
    if status_code in AUTH_STATUSES:
        return AuthError
    if status_code in VALIDATION_STATUSES:
        return ValidationError
    return GatewayError
