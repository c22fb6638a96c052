from .query import ItemFilters, admin_search_items, build_predicates, count_by_status, search_items

__all__ = ["ItemFilters", "admin_search_items", "build_predicates", "count_by_status", "search_items"]
