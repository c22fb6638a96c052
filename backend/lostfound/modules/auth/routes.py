from flask import current_app, g, jsonify

from ...errors import Unauthorized, json_object
from ...ratelimit import rate_limited
from ...security import sign_session_id
from . import bp
from .service import authenticate, logout


def _user_payload(username, role) -> dict:
    return {"username": username, "role": role}


@bp.post("/login")
@rate_limited
def login():
    data = json_object()
    username = data.get("username") if isinstance(data.get("username"), str) else ""
    password = data.get("password") if isinstance(data.get("password"), str) else ""

    user, sid = authenticate(username, password)

    resp = jsonify({"message": "Logged in", "user": _user_payload(user.username, user.role)})
    resp.set_cookie(
        current_app.config["SESSION_COOKIE_NAME"],
        sign_session_id(sid),
        max_age=int(current_app.config["SESSION_IDLE_SECONDS"]),
        httponly=True,
        samesite="Lax",
        secure=bool(current_app.config["SESSION_COOKIE_SECURE"]),
    )
    return resp


@bp.post("/logout")
def logout_route():
    logout(g.auth)
    resp = jsonify({"message": "Logged out"})
    resp.delete_cookie(current_app.config["SESSION_COOKIE_NAME"])
    return resp


@bp.get("/me")
def me():
    if not g.auth.is_authenticated:
        raise Unauthorized()
    return jsonify({"user": _user_payload(g.auth.username, g.auth.role)})
