"""Process-wide authentication context.

``build_auth_context`` turns Settings into the immutable set of
collaborators every request shares: hasher, token issuer/verifier and the
auth service. ``create_app`` stores the result in
``app.extensions["tokengate"]``; request code reaches it via ``get_auth()``.

Secret policy:
- production posture: a missing or short secret aborts startup
- development posture: a missing secret is replaced by a random
  per-process secret (tokens do not survive a restart)
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta

from flask import current_app

from ..config import Settings
from ..exceptions import ConfigurationError
from .passwords import PasswordHasher
from .service import AuthService
from .token import TokenIssuer, TokenVerifier

logger = logging.getLogger(__name__)

EXTENSION_KEY = "tokengate"

# HS256 keys shorter than the digest size weaken the MAC
MIN_SECRET_BYTES = 32


@dataclass(frozen=True)
class AuthContext:
    """Immutable per-process auth collaborators."""

    settings: Settings
    hasher: PasswordHasher
    issuer: TokenIssuer
    verifier: TokenVerifier
    service: AuthService


def _resolve_secret(settings: Settings) -> str:
    secret = settings.jwt_secret_key

    if not secret:
        if not settings.is_development:
            raise ConfigurationError(
                "JWT_SECRET_KEY must be set outside development",
                {"environment": settings.environment}
            )
        logger.warning(
            "JWT_SECRET_KEY is not set; using a random per-process secret "
            "(development only, tokens will not survive a restart)"
        )
        return secrets.token_urlsafe(MIN_SECRET_BYTES)

    if not settings.is_development and len(secret.encode("utf-8")) < MIN_SECRET_BYTES:
        raise ConfigurationError(
            f"JWT_SECRET_KEY must be at least {MIN_SECRET_BYTES} bytes outside development",
            {"environment": settings.environment}
        )

    return secret


def build_auth_context(settings: Settings) -> AuthContext:
    """Build the auth collaborators from settings.

    Raises:
        ConfigurationError: If the secret is unusable for this posture
    """
    secret = _resolve_secret(settings)
    ttl = timedelta(seconds=settings.jwt_expiry_seconds)

    hasher = PasswordHasher(work_factor=settings.bcrypt_work_factor)
    issuer = TokenIssuer(secret, algorithm=settings.jwt_algorithm, ttl=ttl)
    verifier = TokenVerifier(secret, algorithm=settings.jwt_algorithm)

    return AuthContext(
        settings=settings,
        hasher=hasher,
        issuer=issuer,
        verifier=verifier,
        service=AuthService(hasher, issuer),
    )


def get_auth() -> AuthContext:
    """Auth context of the current Flask application."""
    return current_app.extensions[EXTENSION_KEY]
