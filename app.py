import json
import logging
import time

import click
from flask import Flask, g, request
from werkzeug.middleware.proxy_fix import ProxyFix

from config import get_config
from errors import register_error_handlers
from extensions import db, migrate

logger = logging.getLogger(__name__)

MAX_LOG_LINE = 80


def _configure_logging(app: Flask) -> None:
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _register_request_logging(app: Flask) -> None:
    """Log one line per /api request: method, path, status, duration and body."""

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if not request.path.startswith("/api"):
            return response
        started = g.get("request_started", time.perf_counter())
        duration_ms = int((time.perf_counter() - started) * 1000)
        line = f"{request.method} {request.path} {response.status_code} in {duration_ms}ms"
        if response.is_json:
            line += f" :: {json.dumps(response.get_json(), ensure_ascii=False)}"
        if len(line) > MAX_LOG_LINE:
            line = line[: MAX_LOG_LINE - 1] + "…"
        logger.info(line)
        return response


def init_database() -> None:
    """Create missing tables and seed the language table."""
    from models import init_models
    from services.language_service import seed_languages

    init_models()
    db.create_all()
    seed_languages()


def create_app(config_object=None):
    """Application factory for PlateSense."""
    app = Flask(__name__)
    app.config.from_object(config_object or get_config())
    _configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Proxy fix for production behind reverse proxies
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    # Register blueprints
    from blueprints.analysis.routes import analysis_bp
    from blueprints.languages.routes import languages_bp
    from blueprints.nutrition.routes import nutrition_bp
    from blueprints.profile.routes import profile_bp
    from blueprints.users.routes import users_bp

    app.register_blueprint(analysis_bp, url_prefix="/api")
    app.register_blueprint(users_bp, url_prefix="/api")
    app.register_blueprint(profile_bp, url_prefix="/api")
    app.register_blueprint(nutrition_bp, url_prefix="/api")
    app.register_blueprint(languages_bp, url_prefix="/api")

    register_error_handlers(app)
    _register_request_logging(app)

    @app.route("/health")
    def health():
        return {"status": "ok", "app": "PlateSense"}

    @app.cli.command("init-db")
    def init_db_command():
        """Create tables and seed the default languages."""
        init_database()
        click.echo("Database initialised.")

    if app.config.get("AUTO_INIT_DB"):
        with app.app_context():
            init_database()

    return app


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=5000)
