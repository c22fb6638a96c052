from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import current_app
from sqlalchemy.orm import contains_eager

from ...errors import InvalidStatus, NotFound
from ...extensions import db
from ...models.claim import Claim
from ...models.enums import CLAIM_STATUSES
from ...models.item import Item
from ...schemas import ClaimSubmitSchema, load_or_raise

ADMIN_LIST_CAP = 200


def submit_claim(item_id: int, form: Mapping[str, Any], proof_filename: Optional[str] = None) -> Claim:
    """Create a ``new`` claim against an item that is not archived.

    Archived items answer with NotFound, same as a missing id.
    """
    item = db.session.get(Item, item_id)
    if item is None or item.status == "archived":
        raise NotFound("Item not found")
    data = load_or_raise(ClaimSubmitSchema(), form, "Name, email, and message are required")
    claim = Claim(item_id=item.id, status="new", proof_filename=proof_filename, **data)
    db.session.add(claim)
    db.session.commit()
    current_app.logger.info("claim %s submitted for item %s", claim.id, item.id)
    return claim


def get_claim_or_404(claim_id: int) -> Claim:
    claim = db.session.get(Claim, claim_id)
    if claim is None:
        raise NotFound("Claim not found")
    return claim


def list_claims(status: str = "") -> list[Claim]:
    """Claims for the admin queue, newest first, with their item eagerly joined."""
    qry = Claim.query.join(Item, Item.id == Claim.item_id).options(contains_eager(Claim.item))
    if status:
        qry = qry.filter(Claim.status == status)
    return qry.order_by(Claim.created_at.desc(), Claim.id.desc()).limit(ADMIN_LIST_CAP).all()


def set_claim_status(claim_id: int, status: Optional[str]) -> Claim:
    """Move a claim to any known status. Unknown values leave it untouched."""
    if status not in CLAIM_STATUSES:
        raise InvalidStatus()
    claim = get_claim_or_404(claim_id)
    previous = claim.status
    claim.status = status
    db.session.commit()
    current_app.logger.info("claim %s: %s -> %s", claim.id, previous, status)
    return claim
