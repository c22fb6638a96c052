import os
from dataclasses import dataclass, field

# Resolve project base directory robustly (backend/lostfound -> backend -> repo root)
_HERE = os.path.dirname(__file__)
_BASE_DIR = os.path.abspath(os.path.join(_HERE, "..", ".."))


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class BaseConfig:
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI: str = os.getenv(
        "DATABASE_URL", "sqlite:///" + os.path.join(_BASE_DIR, "lostfound.sqlite3")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    JSON_SORT_KEYS: bool = False
    # Create tables and seed the admin account on startup (no migrations needed for SQLite)
    AUTO_CREATE_SCHEMA: bool = _env_bool("AUTO_CREATE_SCHEMA", True)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # File uploads: default to repo-level /uploads to be stable across WorkingDirectory
    UPLOAD_FOLDER: str = os.getenv("UPLOAD_FOLDER", os.path.join(_BASE_DIR, "uploads"))
    MAX_CONTENT_LENGTH: int = _env_int("MAX_CONTENT_LENGTH", 10 * 1024 * 1024)  # whole request, 10 MB
    UPLOAD_MAX_BYTES: int = _env_int("UPLOAD_MAX_BYTES", 5 * 1024 * 1024)  # per image, 5 MiB
    UPLOAD_ALLOWED_TYPES: tuple = field(default_factory=lambda: ("image/jpeg", "image/png", "image/webp"))

    # Admin sessions
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "lf.sid")
    SESSION_COOKIE_SECURE: bool = _env_bool("SESSION_COOKIE_SECURE", False)
    SESSION_IDLE_SECONDS: int = _env_int("SESSION_IDLE_SECONDS", 4 * 60 * 60)
    ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "ChangeMe123!")
    MIN_PASSWORD_LENGTH: int = _env_int("MIN_PASSWORD_LENGTH", 8)

    # Abuse protection for public POSTs, login and the admin API
    RATE_LIMIT_PER_WINDOW: int = _env_int("RATE_LIMIT_PER_WINDOW", 60)
    RATE_LIMIT_WINDOW_SECONDS: int = _env_int("RATE_LIMIT_WINDOW_SECONDS", 60)

    # External URL scheme preference (affects url_for(..., _external=True))
    PREFERRED_URL_SCHEME: str = os.getenv("PREFERRED_URL_SCHEME", "https" if os.getenv("FLASK_ENV") == "production" else "http")


@dataclass
class DevelopmentConfig(BaseConfig):
    DEBUG: bool = True


@dataclass
class ProductionConfig(BaseConfig):
    DEBUG: bool = False
    SESSION_COOKIE_SECURE: bool = _env_bool("SESSION_COOKIE_SECURE", True)


@dataclass
class TestingConfig(BaseConfig):
    TESTING: bool = True
    DEBUG: bool = False
    SECRET_KEY: str = "testing-secret"
    SQLALCHEMY_DATABASE_URI: str = "sqlite://"
    LOG_LEVEL: str = "WARNING"


CONFIG_MAP = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(name: str | None):
    if not name:
        name = os.getenv("FLASK_ENV", "development")
    return CONFIG_MAP.get(name, DevelopmentConfig)()
