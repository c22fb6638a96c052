from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from ...errors import json_object
from ...models.claim import Claim
from ...models.enums import CLAIM_STATUSES, ITEM_STATUSES
from ...models.item import Item
from ...ratelimit import check_rate_limit
from ...schemas import AdminClaimSchema, AdminItemSchema, ClaimSchema, ItemSchema
from ...security import require_admin
from ..auth.service import change_password
from ..claims.service import get_claim_or_404, list_claims, set_claim_status
from ..items.service import delete_item, get_item_or_404, transition_item
from ..search import admin_search_items, count_by_status

bp = Blueprint("admin", __name__, url_prefix="/admin")


@bp.before_request
def _guard():
    # Throttle first so unauthenticated floods are limited too
    check_rate_limit()
    require_admin(g.auth)


@bp.get("/items")
def admin_list_items():
    """Admin item queue.

    Query params:
      - status: exact status (any of pending|approved|claimed|archived), optional
      - q: substring in title/description
    Newest first, at most 200 rows.
    """
    status = (request.args.get("status") or "").strip()
    q = (request.args.get("q") or "").strip()
    rows = admin_search_items(status=status, q=q)
    return jsonify({"items": AdminItemSchema(many=True).dump(rows)})


@bp.get("/items/<int:item_id>")
def admin_get_item(item_id: int):
    item = get_item_or_404(item_id)
    body = ItemSchema().dump(item)
    body["claims"] = ClaimSchema(many=True).dump(item.claims)
    return jsonify({"item": body})


@bp.patch("/items/<int:item_id>")
def admin_update_item(item_id: int):
    """Body: { action: approve|archive|mark_claimed|edit, ...edit fields }"""
    data = json_object()
    item = transition_item(item_id, data.get("action"), data)
    return jsonify({"item": ItemSchema().dump(item)})


@bp.delete("/items/<int:item_id>")
def admin_delete_item(item_id: int):
    delete_item(item_id)
    return jsonify({"message": "Deleted", "id": item_id})


@bp.get("/claims")
def admin_list_claims():
    status = (request.args.get("status") or "").strip()
    return jsonify({"claims": AdminClaimSchema(many=True).dump(list_claims(status))})


@bp.get("/claims/<int:claim_id>")
def admin_get_claim(claim_id: int):
    claim = get_claim_or_404(claim_id)
    body = ClaimSchema().dump(claim)
    body["item_title"] = claim.item.title
    body["item_status"] = claim.item.status
    return jsonify({"claim": body})


@bp.patch("/claims/<int:claim_id>")
def admin_update_claim(claim_id: int):
    """Body: { status: new|in_review|approved|rejected|resolved }"""
    data = json_object()
    claim = set_claim_status(claim_id, data.get("status"))
    return jsonify({"claim": ClaimSchema().dump(claim)})


@bp.get("/stats")
def admin_stats():
    """Overall counts used by the dashboard summary cards."""
    return jsonify(
        {
            "items": count_by_status(Item, ITEM_STATUSES),
            "claims": count_by_status(Claim, CLAIM_STATUSES),
        }
    )


@bp.post("/change-password")
def admin_change_password():
    data = json_object()
    change_password(g.auth, data.get("current") or "", data.get("next") or "")
    return jsonify({"message": "Password changed"})
