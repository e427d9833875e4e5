"""Identity provider exceptions."""


class AuthError(Exception):
    """Base exception for identity provider errors."""
    pass


class InvalidEmailError(AuthError):
    """Raised when an email address is rejected before any request."""
    pass


class ProviderError(AuthError):
    """Raised when the identity provider answers with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SessionExpiredError(AuthError):
    """Raised when the stored session can no longer be refreshed."""
    pass
