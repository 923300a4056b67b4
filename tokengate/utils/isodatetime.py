"""ISO 8601 and unix timestamp conversion utilities.

All "current time" lookups go through this module so that token issuance,
verification and record timestamps agree on UTC.
"""

from datetime import datetime, UTC


def utcnow() -> datetime:
    """Get current time as an aware UTC datetime."""
    return datetime.now(UTC)


def to_timestamp(dt: datetime) -> str:
    """Convert datetime to ISO 8601 UTC timestamp string."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.isoformat().replace("+00:00", "Z")


def to_datetime(timestamp: str) -> datetime:
    """Convert ISO 8601 UTC timestamp string to datetime."""
    return datetime.fromisoformat(timestamp.replace('Z', '+00:00'))


def now() -> str:
    """Get current UTC timestamp as ISO 8601 string."""
    return to_timestamp(utcnow())


def now_unix() -> int:
    """Get current UTC time as integer unix seconds (JWT NumericDate)."""
    return int(utcnow().timestamp())


def from_unix(seconds: int) -> datetime:
    """Convert unix seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, UTC)
