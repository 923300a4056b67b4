"""Flask application entry point."""

import logging

from flask import Flask, jsonify
from flask_cors import CORS

from .auth.api import auth_bp
from .auth.context import EXTENSION_KEY, build_auth_context
from .config import Settings, settings as default_settings
from .db import init_db
from .exceptions import (
    AuthenticationError,
    DuplicateUser,
    StoreUnavailable,
    TokenGateError,
    ValidationError,
)
from .logging_filters import install_redaction

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with credential redaction."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    install_redaction()


def _error_response(error: TokenGateError, error_type: str | None = None):
    response = {
        "error": {
            "type": error_type or error.__class__.__name__,
            "message": error.message
        }
    }
    if error.details:
        response["error"]["details"] = error.details
    return jsonify(response), error.status_code


# Error handlers
def handle_validation_error(error: ValidationError):
    """Handle ValidationError exceptions."""
    return _error_response(error)


def handle_authentication_error(error: AuthenticationError):
    """Handle AuthenticationError and its subclasses.

    Every authentication failure is reported as a plain AuthenticationError
    so clients cannot tell which check failed.
    """
    return _error_response(error, "AuthenticationError")


def handle_duplicate_user(error: DuplicateUser):
    """Handle DuplicateUser exceptions."""
    return _error_response(error)


def handle_store_unavailable(error: StoreUnavailable):
    """Handle StoreUnavailable exceptions (details never exposed)."""
    logger.error(f"Store unavailable: {error.message}")
    return jsonify({
        "error": {
            "type": "StoreUnavailable",
            "message": "Service temporarily unavailable"
        }
    }), error.status_code


def handle_token_gate_error(error: TokenGateError):
    """Handle generic TokenGateError exceptions."""
    return _error_response(error)


def handle_internal_error(error):
    """Handle internal server errors."""
    logger.error(f"Internal error: {error.__class__.__name__}: {error}")
    return jsonify({
        "error": {
            "type": "InternalServerError",
            "message": "An internal error occurred"
        }
    }), 500


def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


def create_app(config: Settings | None = None) -> Flask:
    """
    Build the Flask application.

    Settings are read once here and frozen into the auth context; nothing
    downstream reads the module-level settings.

    Raises:
        ConfigurationError: If the JWT secret is unusable (startup aborts)
        StoreUnavailable: If the credential store cannot be initialized
    """
    config = config or default_settings
    configure_logging(config.log_level)

    auth_context = build_auth_context(config)

    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = auth_context

    # CORS configuration
    CORS(app, origins=config.cors_origins, supports_credentials=True)

    init_db(config.database_path)

    app.register_error_handler(ValidationError, handle_validation_error)
    app.register_error_handler(AuthenticationError, handle_authentication_error)
    app.register_error_handler(DuplicateUser, handle_duplicate_user)
    app.register_error_handler(StoreUnavailable, handle_store_unavailable)
    app.register_error_handler(TokenGateError, handle_token_gate_error)
    app.register_error_handler(500, handle_internal_error)

    app.add_url_rule("/health", "health", health)
    app.register_blueprint(auth_bp, url_prefix=config.api_prefix or None)

    logger.info(f"tokengate started ({config.environment}), auth routes at {config.api_prefix or '/'}")
    return app


if __name__ == "__main__":
    create_app().run(port=default_settings.port, debug=default_settings.is_development)
