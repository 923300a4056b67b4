"""User record operations.

IMPORT CONVENTION:
- Core accesses these through core.users property
- NO direct import needed when using Core API

ID GENERATION POLICY:
User IDs are UUID v4 strings generated here, on insert. Callers never
choose an ID.

HASHING POLICY:
This module stores whatever ``password_hash`` it is handed. Hashing is the
caller's job (AuthService); nothing is transformed on write.
"""

import logging
import sqlite3
from uuid import uuid4

from ..exceptions import DuplicateUser, StoreUnavailable
from ..utils import isodatetime

logger = logging.getLogger(__name__)

_MAX_ID_RETRIES = 3


class UserOperations:
    """User record operations backed by the ``users`` table."""

    def __init__(self, conn: sqlite3.Connection, autocommit: bool = True):
        """Initialize user operations with a database connection.

        Args:
            conn: SQLite connection with row_factory set to sqlite3.Row
            autocommit: Commit after each write (False inside atomic Core)
        """
        self._conn = conn
        self._autocommit = autocommit

    def create(self, name: str, password_hash: str) -> str:
        """Insert a user record with an auto-generated UUID.

        Args:
            name: Unique user name
            password_hash: Already-hashed password

        Returns:
            The new user ID

        Raises:
            DuplicateUser: If a user with this name already exists
            StoreUnavailable: If the store fails
        """
        last_error = None
        for _ in range(_MAX_ID_RETRIES):
            user_id = str(uuid4())
            try:
                self._conn.execute(
                    """INSERT INTO users (id, name, password_hash, created_at)
                       VALUES (?, ?, ?, ?)""",
                    (user_id, name, password_hash, isodatetime.now())
                )
                if self._autocommit:
                    self._conn.commit()
                return user_id
            except sqlite3.IntegrityError as e:
                self._rollback()
                if "users.name" in str(e):
                    raise DuplicateUser(
                        "Username already exists",
                        {"name": name}
                    ) from e
                # UUID collision - retry with new UUID
                last_error = e
            except sqlite3.Error as e:
                self._rollback()
                logger.error(f"User insert failed: {e}")
                raise StoreUnavailable("Credential store is unavailable") from e

        logger.error(f"User ID allocation failed after {_MAX_ID_RETRIES} attempts")
        raise StoreUnavailable("Failed to allocate a user ID") from last_error

    def get_by_name(self, name: str) -> sqlite3.Row | None:
        """Fetch a user record by name, or None if absent."""
        return self._fetch_one("SELECT * FROM users WHERE name = ?", (name,))

    def get_by_id(self, user_id: str) -> sqlite3.Row | None:
        """Fetch a user record by ID, or None if absent."""
        return self._fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))

    def _fetch_one(self, query: str, params: tuple) -> sqlite3.Row | None:
        try:
            return self._conn.execute(query, params).fetchone()
        except sqlite3.Error as e:
            logger.error(f"User lookup failed: {e}")
            raise StoreUnavailable("Credential store is unavailable") from e

    def _rollback(self) -> None:
        if self._autocommit:
            self._conn.rollback()
