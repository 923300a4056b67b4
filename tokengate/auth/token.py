"""JWT issuance and verification.

Tokens are HS256-signed JWTs carrying the claims::

    {"sub": <user id>, "name": <user name>, "iat": <unix>, "exp": <unix>}

Issuer and verifier are built once at startup from the immutable settings
and shared by every request. Neither touches the store: verification is
stateless, there is no revocation list.
"""

import logging
from collections.abc import Mapping
from datetime import timedelta

import jwt

from ..exceptions import ConfigurationError, InvalidToken
from ..utils import isodatetime
from .schemas import TokenPayload, UserIdentity

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "name", "iat", "exp"]


def _require_secret(secret: str) -> str:
    if not secret:
        raise ConfigurationError("JWT secret key is not configured")
    return secret


class TokenIssuer:
    """Creates signed, time-limited bearer tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=1)):
        self._secret = _require_secret(secret)
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, claims: Mapping, ttl: timedelta | None = None) -> str:
        """
        Sign ``claims`` into a compact JWT.

        Args:
            claims: Custom claims; ``iat`` and ``exp`` are set here
            ttl: Lifetime of the token (defaults to the configured TTL)

        Returns:
            Encoded JWT string
        """
        lifetime = self.ttl if ttl is None else ttl
        issued_at = isodatetime.now_unix()

        payload = dict(claims)
        payload["iat"] = issued_at
        payload["exp"] = issued_at + int(lifetime.total_seconds())

        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def issue_for_user(self, user: UserIdentity, ttl: timedelta | None = None) -> str:
        """Issue a token whose claims identify ``user``."""
        return self.issue({"sub": user.id, "name": user.name}, ttl)


class TokenVerifier:
    """Validates bearer tokens against the process secret."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self._secret = _require_secret(secret)
        self.algorithm = algorithm

    def verify(self, token: str) -> TokenPayload:
        """
        Validate signature, structure and expiry and return the claims.

        Raises:
            InvalidToken: For any bad token. Expired, forged and malformed
                tokens are indistinguishable to the caller; the reason is
                only logged.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
            return TokenPayload(**payload)
        except jwt.ExpiredSignatureError:
            logger.warning("Rejected token: expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected token: {e.__class__.__name__}")
        except ValueError as e:
            # pydantic ValidationError for claims of the wrong type
            logger.warning(f"Rejected token: bad claims ({e.__class__.__name__})")

        raise InvalidToken("Invalid or expired token")

    @staticmethod
    def expires_in(payload: TokenPayload) -> timedelta:
        """Remaining lifetime of a verified token (never negative)."""
        remaining = payload.exp - isodatetime.now_unix()
        return timedelta(seconds=max(remaining, 0))
