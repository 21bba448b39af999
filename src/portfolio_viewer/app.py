"""
Flask Application Factory for the portfolio viewer.

This application factory wires:
- Portfolio repository (HTTP service or local fixture file)
- In-process viewer session store
- Session-cookie based access gate + walkthrough UI
"""
import argparse
import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from werkzeug.middleware.proxy_fix import ProxyFix

from .api import viewer_bp
from .api.viewer import STORE_KEY
from .config_defaults import get_bool_setting, get_setting, require_setting
from .extensions import csrf, limiter
from .repository import PortfolioRepository, get_repository
from .viewer_session import DEFAULT_SESSION_LIFETIME, SessionStore

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once (level from LOG_LEVEL, default INFO)."""
    level_name = (level or get_setting('LOG_LEVEL', 'INFO')).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)


def build_repository() -> PortfolioRepository:
    """Instantiate the repository selected by PORTFOLIO_BACKEND."""
    provider = get_setting('PORTFOLIO_BACKEND', 'http')
    config: Dict[str, Any] = {
        'base_url': get_setting('PORTFOLIO_API_URL', 'http://127.0.0.1:5000'),
        'timeout': get_setting('PORTFOLIO_API_TIMEOUT', '10'),
        'path': get_setting('PORTFOLIO_FIXTURE_PATH', 'tests/fixtures/portfolio-fixture.json'),
    }
    return get_repository(provider, config)


def create_app(
    repository: Optional[PortfolioRepository] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        repository: Portfolio repository to use (default: from PORTFOLIO_BACKEND)
        config: Extra Flask config applied last (tests, embedding)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)

    # Trust proxy headers (for reverse proxy deployments)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    # =========================================================================
    # Security Configuration
    # =========================================================================

    app.config['SECRET_KEY'] = require_setting('SECRET_KEY')

    app.config['MAX_CONTENT_LENGTH'] = int(get_setting('MAX_CONTENT_LENGTH', str(64 * 1024)))

    flask_env = get_setting('FLASK_ENV', 'production')

    # Secure cookie - auto mode: off for local testing, on for production
    secure_setting = get_setting('FLASK_SESSION_COOKIE_SECURE', 'auto')
    if secure_setting == 'auto':
        app.config['SESSION_COOKIE_SECURE'] = flask_env != 'local_test'
    else:
        app.config['SESSION_COOKIE_SECURE'] = secure_setting.lower() in ('true', '1', 'yes')

    app.config['SESSION_COOKIE_HTTPONLY'] = get_bool_setting('FLASK_SESSION_COOKIE_HTTPONLY', True)
    app.config['SESSION_COOKIE_SAMESITE'] = get_setting('FLASK_SESSION_COOKIE_SAMESITE', 'Lax')

    session_lifetime = int(get_setting('VIEWER_SESSION_LIFETIME', str(DEFAULT_SESSION_LIFETIME)))
    app.config['PERMANENT_SESSION_LIFETIME'] = session_lifetime
    app.config['TEMPLATES_AUTO_RELOAD'] = get_bool_setting('TEMPLATES_AUTO_RELOAD', False)

    # =========================================================================
    # Rate Limiting
    # =========================================================================

    app.config['GATE_RATE_LIMIT'] = get_setting('GATE_RATE_LIMIT', '30 per minute')
    app.config['RATELIMIT_ENABLED'] = flask_env != 'local_test'
    if flask_env == 'local_test':
        logger.info("Rate limiting disabled for local_test environment")

    if config:
        app.config.update(config)

    csrf.init_app(app)
    limiter.init_app(app)

    # =========================================================================
    # Portfolio repository + viewer sessions
    # =========================================================================

    if repository is None:
        repository = build_repository()
    app.extensions[STORE_KEY] = SessionStore(
        repository,
        lifetime=int(app.config['PERMANENT_SESSION_LIFETIME']),
    )

    app.register_blueprint(viewer_bp)

    # =========================================================================
    # Error Handlers
    # =========================================================================

    def wants_json() -> bool:
        accept = request.accept_mimetypes
        return accept.accept_json and not accept.accept_html

    @app.errorhandler(404)
    def not_found(e):
        if wants_json():
            return jsonify({'error': 'not_found', 'message': 'Endpoint not found'}), 404
        return "Not Found", 404

    @app.errorhandler(500)
    def internal_error(e):
        logger.exception("Internal server error")
        if wants_json():
            return jsonify({'error': 'internal', 'message': 'Internal server error'}), 500
        return "Internal Server Error", 500

    # =========================================================================
    # Health Check
    # =========================================================================

    # Seven characters: every six-character path belongs to the deep link
    @app.route('/healthz')
    def health():
        """Health check endpoint."""
        return jsonify({'status': 'ok'})

    if flask_env == 'local_test':
        @app.after_request
        def add_cache_control_headers(response):
            """Add no-cache headers for HTML in local test mode."""
            if response.content_type and 'text/html' in response.content_type:
                response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
                response.headers['Pragma'] = 'no-cache'
                response.headers['Expires'] = '0'
            return response

    logger.info("Flask application created successfully")

    return app


def main():
    """Run the development server."""
    parser = argparse.ArgumentParser(description="Portfolio viewer development server")
    parser.add_argument('--host', default=get_setting('VIEWER_HOST', '127.0.0.1'))
    parser.add_argument('--port', type=int, default=int(get_setting('VIEWER_PORT', '8080')))
    parser.add_argument('--debug', action='store_true')
    args = parser.parse_args()

    configure_logging()
    app = create_app()
    logger.info(f"Starting portfolio viewer on {args.host}:{args.port}")
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
