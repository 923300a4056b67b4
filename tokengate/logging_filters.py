"""Log redaction.

RedactingFilter masks credentials in log messages before any handler
formats them: bearer tokens, bare JWTs, bcrypt hashes, password/secret
assignments and passwords embedded in connection URLs.
"""

import logging
import re

_REDACTED = "***REDACTED***"

SENSITIVE_PATTERNS = [
    # Authorization headers and bearer tokens
    (re.compile(r"(bearer\s+)([A-Za-z0-9_\-\.=]{8,})", re.IGNORECASE), rf"\1{_REDACTED}"),
    # Bare JWTs (header.payload.signature)
    (re.compile(r"eyJ[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]*"), _REDACTED),
    # bcrypt hashes
    (re.compile(r"\$2[abxy]?\$\d{2}\$[./A-Za-z0-9]{53}"), _REDACTED),
    # password=..., secret_key: ...
    (
        re.compile(r"((?:password|passwd|secret(?:_key)?)['\"]?\s*[:=]\s*['\"]?)([^'\"\s,}]+)", re.IGNORECASE),
        rf"\1{_REDACTED}",
    ),
    # Credentials in connection URLs
    (re.compile(r"([a-z][a-z0-9+.\-]*://[^:/\s]+):([^@\s]+)@", re.IGNORECASE), rf"\1:{_REDACTED}@"),
]


def sanitize_message(message: str) -> str:
    """Return ``message`` with every sensitive value masked."""
    for pattern, replacement in SENSITIVE_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class RedactingFilter(logging.Filter):
    """Logging filter that rewrites records with credentials masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = sanitize_message(record.getMessage())
        record.args = None
        return True


def install_redaction(logger: logging.Logger | None = None) -> None:
    """Attach a RedactingFilter to every handler of ``logger`` (root by default)."""
    target = logger or logging.getLogger()
    for handler in target.handlers:
        if not any(isinstance(f, RedactingFilter) for f in handler.filters):
            handler.addFilter(RedactingFilter())
