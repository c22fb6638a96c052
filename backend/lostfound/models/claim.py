from datetime import datetime, timezone

from sqlalchemy import Index, func

from ..extensions import db
from .enums import claim_status_enum


class Claim(db.Model):
    __tablename__ = "claims"

    id = db.Column(db.Integer, primary_key=True)
    item_id = db.Column(db.Integer, db.ForeignKey("items.id", ondelete="CASCADE"), nullable=False)
    claimant_name = db.Column(db.String(80), nullable=False)
    claimant_email = db.Column(db.String(120), nullable=False)
    student_id = db.Column(db.String(40))
    message = db.Column(db.Text, nullable=False)
    proof_filename = db.Column(db.String(255))
    status = db.Column(claim_status_enum, nullable=False, default="new", server_default="new")
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    item = db.relationship("Item", back_populates="claims")

    __table_args__ = (
        Index("idx_claims_item", "item_id"),
        Index("idx_claims_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Claim {self.id} item={self.item_id} {self.status}>"
