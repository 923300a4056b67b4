"""Exception taxonomy for tokengate.

Every error raised inside a request carries an HTTP status code and an
optional ``details`` dict. The Flask error handlers in ``main`` translate
them into the common error body::

    {"error": {"type": "...", "message": "...", "details": {...}}}

``ConfigurationError`` is the exception to the rule: it is raised while the
application is being built and aborts startup.
"""


class TokenGateError(Exception):
    """Base exception for all tokengate errors."""

    status_code = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(TokenGateError):
    """Request body failed schema validation."""

    status_code = 400


class AuthenticationError(TokenGateError):
    """Caller could not be authenticated."""

    status_code = 401


class Unauthenticated(AuthenticationError):
    """No bearer token was presented."""


class InvalidToken(AuthenticationError):
    """Bearer token is malformed, forged or expired."""


class UserNotFound(AuthenticationError):
    """No user record matches the given name."""


class InvalidCredentials(AuthenticationError):
    """Password does not match the stored hash."""


class DuplicateUser(TokenGateError):
    """A user with the given name already exists."""

    status_code = 409


class StoreUnavailable(TokenGateError):
    """Credential store could not be reached or failed mid-operation."""

    status_code = 503


class ConfigurationError(TokenGateError):
    """Invalid process configuration, raised at startup."""
