from ..extensions import db

# Status vocabularies. Stored as VARCHAR + CHECK so the same schema works on SQLite and Postgres.

ROLES = ("admin",)
ITEM_STATUSES = ("pending", "approved", "claimed", "archived")
CLAIM_STATUSES = ("new", "in_review", "approved", "rejected", "resolved")

role_enum = db.Enum(*ROLES, name="role_enum", native_enum=False, create_constraint=True)
item_status_enum = db.Enum(*ITEM_STATUSES, name="item_status_enum", native_enum=False, create_constraint=True)
claim_status_enum = db.Enum(*CLAIM_STATUSES, name="claim_status_enum", native_enum=False, create_constraint=True)
