import logging
import os
from typing import Any, Mapping

from flask import Flask, abort, send_from_directory
from sqlalchemy import text
from dotenv import load_dotenv
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import get_config
from .errors import register_error_handlers
from .extensions import db, migrate, cors
from .ratelimit import RateLimiter
from .security import SessionStore
from .uploads import init_uploads


def create_app(config_name: str | None = None, overrides: Mapping[str, Any] | None = None) -> Flask:
    app = Flask(__name__)

    # Load config
    # Ensure .env is loaded before reading env vars
    load_dotenv()
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # Honor proxy headers from Nginx so remote_addr is the real client for rate limiting
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)  # type: ignore[assignment]

    # Init extensions
    cors.init_app(app)
    db.init_app(app)
    migrate.init_app(app, db)
    init_uploads(app)
    app.extensions["session_store"] = SessionStore(idle_seconds=int(app.config["SESSION_IDLE_SECONDS"]))
    app.extensions["rate_limiter"] = RateLimiter(
        limit=int(app.config["RATE_LIMIT_PER_WINDOW"]),
        window_seconds=int(app.config["RATE_LIMIT_WINDOW_SECONDS"]),
    )
    register_error_handlers(app)

    # Register blueprints (JSON API)
    from .apis.v1 import register_api
    register_api(app)

    if app.config.get("AUTO_CREATE_SCHEMA"):
        _init_database(app)

    @app.after_request
    def _security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "same-origin")
        return resp

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/db-check")
    def db_check():
        try:
            db.session.execute(text("SELECT 1"))
            return {"db": "ok"}
        except Exception:
            db.session.rollback()
            app.logger.exception("database check failed")
            return {"db": "error"}, 500

    @app.get("/uploads/<path:filename>")
    def uploads(filename: str):
        """Serve stored images read-only by their generated name."""
        base = app.config["UPLOAD_FOLDER"]
        name = os.path.basename(filename)
        if name != filename or not os.path.isfile(os.path.join(base, name)):
            abort(404)
        return send_from_directory(base, name)

    return app


def _init_database(app: Flask) -> None:
    from . import models  # noqa: F401  (register tables)
    from .modules.auth.service import ensure_admin_user

    with app.app_context():
        db.create_all()
        ensure_admin_user()
