from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from sqlalchemy import or_

from ...extensions import db
from ...models.item import Item

MAX_PAGE_SIZE = 50
DEFAULT_PAGE_SIZE = 20
ADMIN_LIST_CAP = 200


def _like(value: str) -> str:
    return f"%{value}%"


# Filter name -> predicate builder. Every active filter is AND-ed onto the query.
PREDICATES: Dict[str, Callable[[str], object]] = {
    "status": lambda v: Item.status == v,
    "q": lambda v: or_(Item.title.ilike(_like(v)), Item.description.ilike(_like(v))),
    "category": lambda v: Item.category == v,
    "location": lambda v: Item.location_found.ilike(_like(v)),
    # date_found is ISO text, so string comparison orders by calendar date
    "date_from": lambda v: Item.date_found >= v,
    "date_to": lambda v: Item.date_found <= v,
}


def _to_int(raw, default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


@dataclass
class ItemFilters:
    q: str = ""
    category: str = ""
    location: str = ""
    status: Optional[str] = "approved"
    date_from: str = ""
    date_to: str = ""
    sort: str = "newest"
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_args(cls, args, *, allow_any_status: bool = False) -> "ItemFilters":
        """Parse listing query args.

        Without ``allow_any_status`` the status is pinned to ``approved``; with it,
        the caller's status is used as given and an empty value means no status filter.
        """
        if allow_any_status:
            status = (args.get("status") if "status" in args else "approved") or ""
            status = status.strip() or None
        else:
            status = "approved"
        sort = (args.get("sort") or "newest").strip().lower()
        return cls(
            q=(args.get("q") or "").strip(),
            category=(args.get("category") or "").strip(),
            location=(args.get("location") or "").strip(),
            status=status,
            date_from=(args.get("date_from") or "").strip(),
            date_to=(args.get("date_to") or "").strip(),
            sort="oldest" if sort == "oldest" else "newest",
            page=max(1, _to_int(args.get("page"), 1)),
            limit=max(1, min(MAX_PAGE_SIZE, _to_int(args.get("limit"), DEFAULT_PAGE_SIZE))),
        )

    def active(self) -> Dict[str, str]:
        values = {
            "status": self.status,
            "q": self.q,
            "category": self.category,
            "location": self.location,
            "date_from": self.date_from,
            "date_to": self.date_to,
        }
        return {k: v for k, v in values.items() if v}

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def build_predicates(filters: Dict[str, str]) -> List[object]:
    return [PREDICATES[name](value) for name, value in filters.items() if name in PREDICATES]


def _ordering(sort: str):
    if sort == "oldest":
        return (Item.created_at.asc(), Item.id.asc())
    return (Item.created_at.desc(), Item.id.desc())


def search_items(filters: ItemFilters) -> tuple[int, List[Item]]:
    """Run a filtered listing and return ``(total, page_rows)``.

    ``total`` counts every matching row before pagination.
    """
    preds = build_predicates(filters.active())
    qry = Item.query.filter(*preds)
    total = qry.order_by(None).count()
    rows = qry.order_by(*_ordering(filters.sort)).offset(filters.offset).limit(filters.limit).all()
    return total, rows


def admin_search_items(status: str = "", q: str = "") -> List[Item]:
    """Admin listing: exact status and substring text only, newest first, capped."""
    active = {k: v for k, v in (("status", status), ("q", q)) if v}
    return (
        Item.query.filter(*build_predicates(active))
        .order_by(*_ordering("newest"))
        .limit(ADMIN_LIST_CAP)
        .all()
    )


def count_by_status(model, statuses) -> Dict[str, int]:
    rows = db.session.query(model.status, db.func.count(model.id)).group_by(model.status).all()
    counts = {s: 0 for s in statuses}
    for status, cnt in rows:
        counts[str(status)] = int(cnt or 0)
    counts["total"] = sum(counts[s] for s in statuses)
    return counts
