"""
List/Filter View.

Derives the displayed sequence of ideas from an already-fetched list:
structured filters first, then free-text search, then sorting. Pure
functions only, never touching the store or the input list.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from sparks.models.idea import Idea


SORT_ORDERS = ("newest", "oldest", "priority")
DEFAULT_SORT = "newest"


@dataclass
class ViewFilters:
    """
    Filter criteria for the idea list.

    None (or an empty string) for a field means "no filter on this field".
    The status filter starts at "active", matching what the list shows on
    first load.
    """
    category: Optional[str] = None
    status: Optional[str] = "active"
    priority: Optional[str] = None
    sort: str = DEFAULT_SORT


def _created_key(idea: Idea) -> float:
    # Naive and aware timestamps cannot be compared directly; epoch seconds can
    if idea.created_at == datetime.min:
        return float("-inf")
    return idea.created_at.timestamp()


def matches_search(idea: Idea, search_text: str) -> bool:
    """Case-insensitive substring match on title, summary or any tag."""
    query = search_text.strip().lower()
    if not query:
        return True
    return (
        query in idea.title.lower()
        or query in idea.summary.lower()
        or any(query in tag.lower() for tag in idea.tags)
    )


def sort_ideas(ideas: Iterable[Idea], sort: Optional[str] = DEFAULT_SORT) -> List[Idea]:
    """
    Return a new list of ideas in the requested order.

    - "newest": created_at descending (also used for unknown values)
    - "oldest": created_at ascending
    - "priority": urgent > important > normal, newest first within a rank
    """
    if sort == "oldest":
        return sorted(ideas, key=_created_key)
    if sort == "priority":
        return sorted(
            ideas,
            key=lambda idea: (idea.priority_rank, _created_key(idea)),
            reverse=True,
        )
    return sorted(ideas, key=_created_key, reverse=True)


def derive_view(
    ideas: Iterable[Idea],
    filters: Optional[ViewFilters] = None,
    search_text: str = "",
) -> List[Idea]:
    """
    Derive the displayed ideas.

    Args:
        ideas: The in-memory list fetched from the store. Not modified.
        filters: Category/status/priority filters and sort order.
            Defaults to ViewFilters() (active ideas, newest first).
        search_text: Free text matched against title, summary and tags.

    Returns:
        A new list with the matching ideas in display order.
    """
    if filters is None:
        filters = ViewFilters()

    result = list(ideas)

    if filters.category:
        result = [i for i in result if i.category == filters.category]
    if filters.status:
        result = [i for i in result if i.status == filters.status]
    if filters.priority:
        result = [i for i in result if i.priority == filters.priority]

    if search_text and search_text.strip():
        result = [i for i in result if matches_search(i, search_text)]

    return sort_ideas(result, filters.sort)

