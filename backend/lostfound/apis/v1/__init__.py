from flask import Blueprint, Flask, g, jsonify

from ...modules.admin.routes import bp as admin_bp
from ...modules.auth import bp as auth_bp
from ...modules.items.routes import bp as items_bp
from ...security import load_auth_context


def register_api(app: Flask) -> None:
    api = Blueprint("api", __name__, url_prefix="/api")

    # Resolve the session cookie once per request; handlers read g.auth and
    # pass it into the service layer explicitly.
    @api.before_request
    def _load_auth_context():
        g.auth = load_auth_context()

    @api.get("/health")
    def api_health():
        return jsonify({"ok": True})

    # Mount feature blueprints
    api.register_blueprint(items_bp)
    api.register_blueprint(auth_bp)
    api.register_blueprint(admin_bp)

    app.register_blueprint(api)
