"""Authentication service: registration and login.

The service is stateless apart from its collaborators (hasher, issuer),
which are built once at startup. The credential store is passed per call
as a ``Core`` so that each request uses its own connection.

Hashing happens here, before the record is handed to the store. The store
performs no transformation on write.
"""

import logging
import secrets

from ..db import Core
from ..exceptions import InvalidCredentials, UserNotFound
from ..utils import isodatetime
from .passwords import PasswordHasher
from .schemas import LoginResponse, UserCreate, UserIdentity, UserLogin, UserResponse
from .token import TokenIssuer

logger = logging.getLogger(__name__)


class AuthService:
    """Orchestrates register and login flows."""

    def __init__(self, hasher: PasswordHasher, issuer: TokenIssuer):
        self.hasher = hasher
        self.issuer = issuer
        # Unknown names are checked against this hash so every failed login costs one bcrypt check
        self._dummy_hash = hasher.hash(secrets.token_urlsafe(16))

    def register(self, core: Core, data: UserCreate) -> UserResponse:
        """
        Create a user with a freshly hashed password.

        Does not log the user in.

        Raises:
            DuplicateUser: If the name is taken (existing record untouched)
            StoreUnavailable: If the store fails
        """
        password_hash = self.hasher.hash(data.password)
        user_id = core.users.create(data.name, password_hash)

        row = core.users.get_by_id(user_id)
        logger.info(f"Registered user: {data.name}")

        return UserResponse(
            id=row["id"],
            name=row["name"],
            created_at=isodatetime.to_datetime(row["created_at"]),
        )

    def login(self, core: Core, data: UserLogin) -> LoginResponse:
        """
        Verify credentials and issue a bearer token.

        Raises:
            UserNotFound: If no user has this name
            InvalidCredentials: If the password does not match
            StoreUnavailable: If the store fails
        """
        row = core.users.get_by_name(data.name)
        if row is None:
            self.hasher.verify(data.password, self._dummy_hash)
            raise UserNotFound("User not found", {"name": data.name})

        if not self.hasher.verify(data.password, row["password_hash"]):
            raise InvalidCredentials("Invalid password", {"name": data.name})

        user = UserIdentity(id=row["id"], name=row["name"])
        token = self.issuer.issue_for_user(user)
        logger.info(f"Successful login: {user.name}")

        return LoginResponse(user=user, token=token)
