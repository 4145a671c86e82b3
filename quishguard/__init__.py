"""Application factory."""
from typing import Optional

from flask import Flask
from flask_cors import CORS

from quishguard.config import DEFAULT_SECRET_KEY, config
from quishguard.api.routes import api_bp, limiter
from quishguard.core.analyzer import URLAnalyzer
from quishguard.core.reporting import ReportingService
from quishguard.utils.logger import get_logger

logger = get_logger(__name__)


def create_app(analyzer: Optional[URLAnalyzer] = None,
               reporting: Optional[ReportingService] = None,
               testing: bool = False) -> Flask:
    """
    Create and configure Flask application.

    Args:
        analyzer: Analyzer to serve; defaults to the configured six-check analyzer
        reporting: Reporting service; defaults to a fresh in-memory service
        testing: Enable Flask testing mode and disable rate limits

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key
    if config.is_production and config.secret_key == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is not set; using the built-in default")
    if testing:
        app.config['TESTING'] = True
        app.config['RATELIMIT_ENABLED'] = False

    # Extensions
    CORS(app, resources={r"/api/*": {"origins": config.allowed_origins}})
    limiter.init_app(app)

    # One analyzer (and cache) per application
    app.extensions['quishguard.analyzer'] = analyzer or URLAnalyzer.default()
    app.extensions['quishguard.reporting'] = reporting or ReportingService()

    # Blueprints
    app.register_blueprint(api_bp, url_prefix='/api')

    stats = app.extensions['quishguard.analyzer'].cache_stats()
    logger.info(f"Analyzer ready (cache enabled: {stats['enabled']})")

    @app.route('/')
    def index():
        return {
            "message": "QuishGuard API is running",
            "version": config.version,
            "docs": "/api/info"
        }

    return app
