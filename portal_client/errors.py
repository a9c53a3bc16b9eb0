class ClientError(Exception):
    """Base class for errors raised by the portal client."""


class ValidationError(ClientError):
    """Advisory client-side check failed; no request was sent."""


class TransientNetworkFailure(ClientError):
    """Connection error or timeout; safe to retry."""


class ApiError(ClientError):
    def __init__(self, status_code, message, code=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


class AuthenticationRequired(ApiError):
    """The server answered 401; the cached token has been cleared."""

    def __init__(self, message="Please log in again", code=None):
        super().__init__(401, message, code)


class FormBusy(ClientError):
    """A request for this form is already in flight."""
