"""Item lifecycle: public submission, visibility rules and admin moderation."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import current_app

from ...errors import Forbidden, InvalidAction, NotFound
from ...extensions import db
from ...models.item import Item
from ...schemas import ItemEditSchema, ItemSubmitSchema, load_or_raise
from ...security import AuthContext
from ...uploads import get_upload_store
from ..search import ItemFilters, search_items

# action -> resulting status; None means the status is left alone
ACTIONS: dict[str, Optional[str]] = {
    "approve": "approved",
    "archive": "archived",
    "mark_claimed": "claimed",
    "edit": None,
}


def get_item_or_404(item_id: int) -> Item:
    item = db.session.get(Item, item_id)
    if item is None:
        raise NotFound()
    return item


def submit_item(form: Mapping[str, Any], photo_filename: Optional[str] = None) -> Item:
    """Create a pending item from a public report.

    Raise before any insert when a required field is missing; the caller is
    responsible for discarding an already stored photo.
    """
    data = load_or_raise(ItemSubmitSchema(), form)
    item = Item(status="pending", photo_filename=photo_filename, **data)
    db.session.add(item)
    db.session.commit()
    current_app.logger.info("item %s submitted (photo=%s)", item.id, bool(photo_filename))
    return item


def get_item(item_id: int, auth: AuthContext) -> Item:
    item = get_item_or_404(item_id)
    if item.status != "approved" and not auth.is_admin:
        raise Forbidden("Item not accessible")
    return item


def list_items(args: Mapping[str, Any], auth: AuthContext) -> tuple[ItemFilters, int, list[Item]]:
    requested = (args.get("status") or "").strip()
    if requested and requested != "approved" and not auth.is_admin:
        raise Forbidden("Only approved items are listed publicly")
    filters = ItemFilters.from_args(args, allow_any_status=auth.is_admin)
    total, rows = search_items(filters)
    return filters, total, rows


def transition_item(item_id: int, action: Optional[str], payload: Mapping[str, Any] | None = None) -> Item:
    """Apply an admin action to an item and return the updated record."""
    if not isinstance(action, str) or action not in ACTIONS:
        raise InvalidAction()
    item = get_item_or_404(item_id)

    if action == "edit":
        data = load_or_raise(ItemEditSchema(), payload or {})
        for key, value in data.items():
            setattr(item, key, value)
    else:
        # No precondition: an archived item can be restored
        item.status = ACTIONS[action]

    db.session.commit()
    current_app.logger.info("item %s: %s -> status=%s", item.id, action, item.status)
    return item


def delete_item(item_id: int) -> None:
    """Delete an item, its claims and every file they reference.

    Files go first and the row last: an interruption can orphan a file but
    never leave a row pointing at a removed file.
    """
    item = get_item_or_404(item_id)
    store = get_upload_store()
    for claim in item.claims:
        if claim.proof_filename:
            store.delete(claim.proof_filename)
    if item.photo_filename:
        store.delete(item.photo_filename)

    claim_count = len(item.claims)
    db.session.delete(item)
    db.session.commit()
    current_app.logger.info("item %s deleted with %d claim(s)", item_id, claim_count)
