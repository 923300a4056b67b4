"""Authentication API endpoints for tokengate.

Routes (mounted under settings.api_prefix, default /api/users):
- POST /register  - Create a user account
- POST /login     - Authenticate and return a bearer token
- GET  /protected - Example route gated by @auth_required
- GET  /me        - Identity and remaining token lifetime of the caller

All endpoints return JSON responses. Failed logins are reported the same way
whether the name is unknown or the password is wrong.
"""

import logging

from flask import Blueprint, g, jsonify

from ..api.validation import validate_request
from ..db import get_core
from ..exceptions import AuthenticationError, InvalidCredentials, UserNotFound
from ..utils import isodatetime
from .context import get_auth
from .decorators import auth_required
from .schemas import RegistrationResponse, UserCreate, UserLogin

logger = logging.getLogger(__name__)


# Create blueprint
auth_bp = Blueprint("auth", __name__)


# ============================================================================
# Registration
# ============================================================================


@auth_bp.route("/register", methods=["POST"])
@validate_request
def register(data: UserCreate):
    """
    Create a user account.

    Does not log the user in; call /login afterwards.

    Raises:
        ValidationError: If request data is invalid (400)
        DuplicateUser: If the name is already registered (409)
        StoreUnavailable: If the credential store fails (503)

    Example request:
    ```json
    {"name": "alice", "password": "s3cret"}
    ```

    Example response (201):
    ```json
    {"message": "User registered successfully"}
    ```
    """
    auth = get_auth()

    with get_core(auth.settings.database_path, atomic=True) as core:
        auth.service.register(core, data)

    return jsonify(
        RegistrationResponse(message="User registered successfully").model_dump()
    ), 201


# ============================================================================
# Login
# ============================================================================


@auth_bp.route("/login", methods=["POST"])
@validate_request
def login(data: UserLogin):
    """
    Authenticate a user and return a bearer token.

    Raises:
        AuthenticationError: If the name is unknown or the password is wrong (401)

    Example response (200):
    ```json
    {
        "user": {"id": "550e8400-e29b-41d4-a716-446655440000", "name": "alice"},
        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
        "token_type": "bearer"
    }
    ```
    """
    auth = get_auth()

    core = get_core(auth.settings.database_path)
    try:
        result = auth.service.login(core, data)
    except (UserNotFound, InvalidCredentials) as e:
        logger.warning(f"Failed login attempt for name {data.name}: {e.__class__.__name__}")
        raise AuthenticationError("Invalid username or password") from e
    finally:
        core.close()

    return jsonify(result.model_dump()), 200


# ============================================================================
# Protected Endpoints
# ============================================================================


@auth_bp.route("/protected", methods=["GET"])
@auth_required
def protected():
    """
    Example protected route.

    Requires ``Authorization: Bearer <token>``.

    Example response (200):
    ```json
    {
        "message": "This is a protected route",
        "user": {"id": "550e8400-e29b-41d4-a716-446655440000", "name": "alice"}
    }
    ```
    """
    return jsonify({
        "message": "This is a protected route",
        "user": g.claims.identity().model_dump(),
    }), 200


@auth_bp.route("/me", methods=["GET"])
@auth_required
def me():
    """
    Identity of the caller, taken from the token claims.

    Example response (200):
    ```json
    {
        "user": {"id": "550e8400-e29b-41d4-a716-446655440000", "name": "alice"},
        "expires_in": 3597,
        "expires_at": "2026-01-02T03:04:05Z"
    }
    ```
    """
    remaining = get_auth().verifier.expires_in(g.claims)
    return jsonify({
        "user": g.claims.identity().model_dump(),
        "expires_in": int(remaining.total_seconds()),
        "expires_at": isodatetime.to_timestamp(isodatetime.from_unix(g.claims.exp)),
    }), 200
