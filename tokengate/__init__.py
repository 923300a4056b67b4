"""tokengate: username/password authentication with stateless bearer tokens."""

__version__ = "0.1.0"
