"""
Views module.

Client-side derivation of the displayed idea list (filter, search, sort).
"""

from sparks.views.filters import (
    SORT_ORDERS,
    DEFAULT_SORT,
    ViewFilters,
    derive_view,
    matches_search,
    sort_ideas,
)

__all__ = [
    "SORT_ORDERS",
    "DEFAULT_SORT",
    "ViewFilters",
    "derive_view",
    "matches_search",
    "sort_ideas",
]
