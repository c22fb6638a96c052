from datetime import datetime, timezone

from sqlalchemy import Index, func

from ..extensions import db
from .enums import item_status_enum


class Item(db.Model):
    __tablename__ = "items"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(60), nullable=False)
    location_found = db.Column(db.String(120), nullable=False)
    # ISO YYYY-MM-DD kept as text; range filters compare it lexicographically
    date_found = db.Column(db.String(10), nullable=False)
    photo_filename = db.Column(db.String(255))
    status = db.Column(item_status_enum, nullable=False, default="pending", server_default="pending")
    reporter_name = db.Column(db.String(80), nullable=False)
    reporter_email = db.Column(db.String(120), nullable=False)
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    claims = db.relationship(
        "Claim",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="Claim.id",
    )

    __table_args__ = (
        Index("idx_items_status_created", "status", "created_at"),
        Index("idx_items_category", "category"),
        Index("idx_items_date_found", "date_found"),
    )

    def __repr__(self) -> str:
        return f"<Item {self.id} {self.status}>"
