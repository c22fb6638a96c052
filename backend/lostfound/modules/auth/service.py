from __future__ import annotations

from flask import current_app
from sqlalchemy import func

from ...errors import Unauthorized, ValidationError
from ...extensions import db
from ...models.user import User
from ...security import AuthContext, get_session_store


def authenticate(username: str, password: str) -> tuple[User, str]:
    """Check credentials and open a session. Returns the user and session id."""
    username = (username or "").strip()
    if not username or not password:
        raise Unauthorized("Invalid credentials")
    user = User.query.filter_by(username=username).first()
    if user is None or not user.check_password(password):
        current_app.logger.info("failed login for %r", username)
        raise Unauthorized("Invalid credentials")

    # Update last login timestamp
    try:
        user.last_login_at = func.now()
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.warning("could not record last login for user %s", user.id, exc_info=True)

    sid = get_session_store().create(user.id, user.username, user.role)
    current_app.logger.info("user %s logged in", user.username)
    return user, sid


def logout(auth: AuthContext) -> None:
    if auth.session_id:
        get_session_store().revoke(auth.session_id)
        current_app.logger.info("user %s logged out", auth.username)


def change_password(auth: AuthContext, current: str, new: str) -> None:
    user = db.session.get(User, auth.user_id)
    if user is None or not isinstance(current, str) or not user.check_password(current):
        raise ValidationError("Current password incorrect")
    min_len = int(current_app.config["MIN_PASSWORD_LENGTH"])
    if not isinstance(new, str) or len(new) < min_len:
        raise ValidationError("New password too short")
    user.set_password(new)
    db.session.commit()
    current_app.logger.info("password changed for user %s", user.username)


def ensure_admin_user() -> bool:
    """Seed the configured admin account if it does not exist yet."""
    username = current_app.config["ADMIN_USERNAME"]
    if User.query.filter_by(username=username).first() is not None:
        return False
    user = User(username=username, role="admin")
    user.set_password(current_app.config["ADMIN_PASSWORD"])
    db.session.add(user)
    db.session.commit()
    current_app.logger.warning("seeded admin account %r; change its password", username)
    return True
