import logging
import os
import sys

from flask import Flask

from paramshield.escapers import HTMLEscaper, JavaScriptEscaper
from paramshield.exceptions import ConfigurationError
from paramshield.middleware import EscapedParams, RequestIdMiddleware, escaped_params, get_sanitizer
from paramshield.sanitize import EscapeMode, ParamSanitizer

__all__ = [
    'create_app',
    'ConfigurationError',
    'EscapeMode',
    'EscapedParams',
    'HTMLEscaper',
    'JavaScriptEscaper',
    'ParamSanitizer',
    'RequestIdMiddleware',
    'escaped_params',
    'get_sanitizer',
]


def setup_logging(level):
    """Send log records to stdout at the configured level."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s [%(name)s] %(message)s'
        ))
        root_logger.addHandler(handler)


def create_app(config_name=None):
    """Flask application factory"""
    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    from config import config
    app.config.from_object(config[config_name])

    setup_logging(app.config['LOG_LEVEL'])

    # Initialize extensions
    EscapedParams(app)
    app.wsgi_app = RequestIdMiddleware(app.wsgi_app)

    # Register blueprints
    from paramshield.routes.echo import echo_bp
    app.register_blueprint(echo_bp, url_prefix='/echo')

    # Health check endpoint
    @app.route('/health')
    def health():
        return {'status': 'healthy', 'service': 'paramshield'}, 200

    return app
