"""Database module for tokengate.

This module provides the Core API for credential store operations.
Core encapsulates connection management and provides access to the
user operations.

ARCHITECTURE:
- Core owns its connection (no Flask g.db dependency)
- Connection closes on context exit (atomic=True) or on garbage
  collection (atomic=False, autocommit per statement)
- The database path is passed in explicitly; this module reads no
  global settings

ERROR POLICY:
sqlite3 errors never leave this package. Uniqueness violations on
``users.name`` become DuplicateUser, anything that means the store cannot
serve the request becomes StoreUnavailable. There are no retries here.
"""

import logging
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

from ..exceptions import StoreUnavailable
from ..schema import SCHEMA_PATH

if TYPE_CHECKING:
    from .users import UserOperations

logger = logging.getLogger(__name__)


class Core:
    """
    Credential store Core with user operations.

    Maintains its own connection and transaction state.

    Connection Lifecycle:
    - atomic=True: Connection closes on __exit__ from context manager
    - atomic=False: Each statement is committed by the operation itself
    """

    def __init__(self, connection: sqlite3.Connection, atomic: bool = False):
        """Initialize Core with a database connection.

        Args:
            connection: SQLite connection with row_factory set to sqlite3.Row
            atomic: If True, Core MUST be used as context manager.
                    If False, Core has autocommit semantics.
        """
        self._conn = connection
        self._atomic = atomic
        self._user_ops = None

    @property
    def users(self) -> "UserOperations":
        """User record operations.

        Lazy-loaded to avoid circular import issues.
        """
        if self._user_ops is None:
            from .users import UserOperations
            self._user_ops = UserOperations(self._conn, autocommit=not self._atomic)
        return self._user_ops

    def close(self) -> None:
        """Close the underlying connection."""
        self._conn.close()

    def __enter__(self) -> "Core":
        """Enter context manager for atomic transaction.

        Raises:
            RuntimeError: If Core was not created with atomic=True
        """
        if not self._atomic:
            raise RuntimeError(
                "Core must be created with atomic=True for context manager use. "
                "Use: with db.get_core(path, atomic=True) as core:"
            )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager, committing or rolling back transaction."""
        try:
            if exc_type is None:
                self._conn.commit()
            else:
                self._conn.rollback()
        finally:
            self._conn.close()

    def __del__(self):
        """Cleanup connection if not already closed."""
        if hasattr(self, "_conn") and self._conn:
            try:
                self._conn.close()
            except sqlite3.Error:
                # Connection may already be closed or invalid
                pass


def _create_connection(database_path: str) -> sqlite3.Connection:
    """Create a fresh database connection.

    Raises:
        StoreUnavailable: If the database file cannot be opened
    """
    db_path = Path(database_path)
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(db_path))
    except (OSError, sqlite3.Error) as e:
        logger.error(f"Cannot open credential store at {db_path}: {e}")
        raise StoreUnavailable("Credential store is unavailable") from e

    conn.row_factory = sqlite3.Row
    return conn


def get_core(database_path: str, atomic: bool = False) -> Core:
    """
    Get a database Core instance.

    Args:
        database_path: Path of the SQLite database file
        atomic: If True, returns a Core that MUST be used as context manager.
                If False (default), each operation commits independently.

    Examples:
        Autocommit mode (single operation):
        >>> core = get_core("./data/tokengate.db")
        >>> row = core.users.get_by_name("alice")

        Atomic mode:
        >>> with get_core("./data/tokengate.db", atomic=True) as core:
        ...     core.users.create("alice", password_hash)
    """
    return Core(_create_connection(database_path), atomic=atomic)


# ============================================================================
# DATABASE INITIALIZATION
# ============================================================================

def init_db(database_path: str) -> None:
    """Initialize database by running schema.sql if not already initialized."""
    conn = _create_connection(database_path)
    try:
        cursor = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='_schema_metadata'"
        )
        if cursor.fetchone():
            # Database already initialized, skip
            return

        conn.executescript(SCHEMA_PATH.read_text())
        conn.commit()
        logger.info(f"Credential store initialized at {database_path}")
    except sqlite3.Error as e:
        logger.error(f"Credential store initialization failed: {e}")
        raise StoreUnavailable("Credential store could not be initialized") from e
    finally:
        conn.close()


__all__ = ["Core", "get_core", "init_db"]
