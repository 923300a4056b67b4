"""Authentication decorators for protected endpoints.

This module provides:
- _authenticate_request() - shared bearer-token check, usable from a
  blueprint's before_request
- @auth_required - applies the check to a single view

The check is stateless: the token is verified against the process secret,
there is no session lookup and no revocation list.
"""

import logging
from functools import wraps

from flask import g, request

from ..exceptions import Unauthenticated
from .context import get_auth

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


# ============================================================================
# Shared Authentication Logic
# ============================================================================


def _extract_bearer_token() -> str | None:
    """Return the token from ``Authorization: Bearer <token>``, if any."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith(BEARER_PREFIX):
        return None
    token = auth_header[len(BEARER_PREFIX):].strip()
    return token or None


def _authenticate_request():
    """
    Verify the request's bearer token.

    Stores authenticated user information in flask.g:
    - g.user_id: User ID (UUID)
    - g.username: User name
    - g.claims: Full TokenPayload

    Raises:
        Unauthenticated: If no bearer token was presented
        InvalidToken: If the token fails verification
    """
    token_str = _extract_bearer_token()
    if token_str is None:
        logger.warning(f"Unauthenticated request to {request.path}")
        raise Unauthenticated(
            "Authentication required",
            {"expected": "Authorization: Bearer <token>"}
        )

    payload = get_auth().verifier.verify(token_str)

    g.user_id = payload.sub
    g.username = payload.name
    g.claims = payload

    logger.debug(f"Token authentication successful for user {g.username}")


# ============================================================================
# Auth Required Decorator
# ============================================================================


def auth_required(f):
    """
    Decorator to require a valid bearer token for endpoint access.

    Example:
    ```python
    @auth_bp.get("/protected")
    @auth_required
    def protected():
        return jsonify({"user": g.username})
    ```
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        _authenticate_request()
        return f(*args, **kwargs)

    return wrapper
