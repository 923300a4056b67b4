"""Password hashing and verification.

Uses bcrypt with a random per-hash salt and a work factor fixed for the
lifetime of the process.
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)


class PasswordHasher:
    """bcrypt hasher bound to a single work factor."""

    def __init__(self, work_factor: int = 12):
        self.work_factor = work_factor

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt.

        Returns:
            60-character bcrypt hash string (``$2b$...``)
        """
        salt = bcrypt.gensalt(rounds=self.work_factor)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored bcrypt hash.

        Returns False on mismatch and on unusable hashes; never raises.
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError) as e:
            logger.warning(f"Password verification against malformed hash: {e}")
            return False
