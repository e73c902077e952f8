import structlog
from flask import Flask
from flask_cors import CORS

from .config.logging_config import configure_logging
from .config.settings import RelayConfig
from .endpoints.process import handle_method_not_allowed, handle_payload_too_large, process_bp

logger = structlog.get_logger()


def create_app(config: RelayConfig = None, model_client_factory=None):
    """
    Builds the relay application.
    Args:
        config (RelayConfig): Startup configuration. Read from the environment when omitted.
        model_client_factory (callable): Builds a model client from an API key. Defaults to `genai.Client`.
    Returns:
        app (Flask): Configured application.
    """
    config = config or RelayConfig.from_env()
    configure_logging(config.log_level)

    missing = config.missing_fields()
    if missing:
        logger.warning("Relay started without required settings; process requests will fail", missing=missing)

    app = Flask(__name__)
    app.config["RELAY_CONFIG"] = config
    app.config["MODEL_CLIENT_FACTORY"] = model_client_factory
    app.config["MAX_CONTENT_LENGTH"] = config.max_content_length
    CORS(app, resources={r"/*": {"origins": config.ui_url}})

    app.register_blueprint(process_bp)
    app.register_error_handler(405, handle_method_not_allowed)
    app.register_error_handler(413, handle_payload_too_large)

    return app
