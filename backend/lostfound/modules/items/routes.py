from flask import Blueprint, g, jsonify, request

from ...ratelimit import rate_limited
from ...schemas import ClaimSchema, ItemSchema, ItemSummarySchema
from ...uploads import get_upload_store
from ..claims.service import submit_claim
from .service import get_item, list_items, submit_item

bp = Blueprint("items", __name__, url_prefix="/items")


@bp.get("")
def list_public_items():
    """Search approved items.

    Query params: q, category, location, status (admins only), date_from,
    date_to, sort (newest|oldest), page, limit (1-50).
    """
    filters, total, rows = list_items(request.args, g.auth)
    return jsonify(
        {
            "page": filters.page,
            "limit": filters.limit,
            "total": total,
            "items": ItemSummarySchema(many=True).dump(rows),
        }
    )


@bp.get("/<int:item_id>")
def get_public_item(item_id: int):
    return jsonify(ItemSchema().dump(get_item(item_id, g.auth)))


@bp.post("")
@rate_limited
def create_item():
    """Report a found item (multipart; optional image field ``photo``)."""
    store = get_upload_store()
    with store.staged(request.files.get("photo")) as photo:
        item = submit_item(request.form, photo_filename=photo)
    return jsonify({"id": item.id, "status": item.status, "message": "Submitted for review"}), 201


@bp.post("/<int:item_id>/claim")
@rate_limited
def create_claim(item_id: int):
    """Submit a claim against an item (multipart; optional image field ``proof``)."""
    store = get_upload_store()
    with store.staged(request.files.get("proof")) as proof:
        claim = submit_claim(item_id, request.form, proof_filename=proof)
    body = ClaimSchema(only=("id", "status")).dump(claim)
    body["message"] = "Claim submitted"
    return jsonify(body), 201
