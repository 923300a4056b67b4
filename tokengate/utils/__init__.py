"""Utility functions for tokengate.

Import convention: use module-level imports for clarity.

    from utils import isodatetime
    timestamp = isodatetime.now()
    issued_at = isodatetime.now_unix()
"""

from . import isodatetime

__all__ = ["isodatetime"]
