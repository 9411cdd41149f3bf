from __future__ import annotations


class SSOError(Exception):
    """Base class for every error raised by evesso."""
    pass


class TransportError(SSOError):
    """Raised when the HTTP request itself fails (connection, TLS, timeout)."""
    pass


class DecodingError(SSOError):
    """Raised when a response body is not JSON or does not have the expected shape."""
    pass


class ProviderError(SSOError):
    """
    Raised when the SSO server answers with an `error` field.

    The message is the server's `error_description`; the raw error code is
    kept on `error`.
    """

    def __init__(self, error: str, description: str | None = None) -> None:
        self.error = error
        self.description = description or ""
        super().__init__(self.description or error)


class AuthenticationError(SSOError):
    """Raised when authentication fails."""
    pass


class TokenExpiredError(AuthenticationError):
    """Raised when token has expired."""
    pass


class InvalidTokenError(AuthenticationError):
    """Raised when token is malformed or invalid."""
    pass


class KeyNotFoundError(InvalidTokenError):
    """Raised when the token's `kid` does not match exactly one published key."""
    pass


class KeyMaterialError(InvalidTokenError):
    """Raised when a published key cannot be turned into a public key."""
    pass


class ClaimError(InvalidTokenError):
    """Raised when a header field or claim is missing or has the wrong type."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")
