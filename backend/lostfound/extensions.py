import os
import sqlite3

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS
from sqlalchemy import event
from sqlalchemy.engine import Engine

# Flask extensions singletons

db = SQLAlchemy()
migrate = Migrate()

# Configure allowed origins from env (comma-separated). In production avoid wildcard.
_allowed = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
_origins = [o.strip() for o in _allowed.split(",") if o.strip()] if _allowed else []
if not _origins:
	# Fallback defaults for local development
	env = os.getenv("FLASK_ENV", "development").lower()
	if env != "production":
		_origins = [
			"http://localhost:5173",
			"http://127.0.0.1:5173",
			"http://localhost:3000",
			"http://127.0.0.1:3000",
		]
# Session cookies must travel with cross-origin admin requests from the dev frontend
cors = CORS(resources={r"/api/*": {"origins": _origins}}, supports_credentials=True)


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
	# Only apply for the sqlite3 DB-API connection object
	if isinstance(dbapi_connection, sqlite3.Connection):
		cursor = dbapi_connection.cursor()
		try:
			cursor.execute("PRAGMA foreign_keys=ON;")
			# In-memory databases report "memory" instead of switching; that is fine
			cursor.execute("PRAGMA journal_mode=WAL;")
		finally:
			cursor.close()
