"""HTTP boundary helpers shared by tokengate blueprints."""

from .validation import validate_request

__all__ = ["validate_request"]
