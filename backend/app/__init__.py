"""Application factory and app-wide configuration."""

from typing import Optional, Type

from flask import Flask
from flask_cors import CORS

from backend.app.api.routes import api_bp
from backend.config import Config
from backend.logging_config import setup_logging


def create_app(config_object: Optional[Type[Config]] = None) -> Flask:
    """Build the Flask app instance."""
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_object is not None:
        app.config.from_object(config_object)

    setup_logging(app.config["LOG_LEVEL"])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
