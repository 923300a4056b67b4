"""Authentication module for tokengate.

This module provides authentication functionality:
- Schema validation for auth operations
- Password hashing and verification (bcrypt)
- JWT token issuance and verification
- Register and login orchestration
- Bearer-token middleware for protected endpoints

Auth endpoints (under settings.api_prefix):
- POST /register - Create an account
- POST /login - Authenticate and return a bearer token
- GET /protected - Example protected route
- GET /me - Current user from the token
"""

from . import schemas, token

__all__ = ["schemas", "token"]
