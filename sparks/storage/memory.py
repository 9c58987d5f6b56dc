"""
In-memory storage backend.

Keeps categories and ideas in dictionaries. Used for local development
(STORAGE_BACKEND=memory) and for tests. Data is lost when the process ends.
"""

import uuid
from dataclasses import replace
from typing import Any, Dict, List, Optional

from sparks.errors import NotFoundError
from sparks.models.idea import Category, Idea, utcnow
from sparks.storage.base import IDEA_CREATE_FIELDS, Storage, updatable_fields
from sparks.views.filters import sort_ideas


def _copy(idea: Idea) -> Idea:
    """Detached copy so callers cannot change stored records in place."""
    return replace(idea, tags=list(idea.tags))


class MemoryStorage(Storage):
    """
    Dictionary-backed storage.

    Mirrors what the hosted store does on insert: assigns a UUID id and
    timestamps, and applies defaults for status and priority.
    """

    def __init__(self):
        self._categories: Dict[str, Category] = {}
        self._ideas: Dict[str, Idea] = {}

    @property
    def name(self) -> str:
        return "memory"

    def list_categories(self) -> List[Category]:
        return sorted(self._categories.values(), key=lambda c: c.name)

    def create_category(self, name: str) -> Category:
        category = Category(id=str(uuid.uuid4()), name=name, created_at=utcnow())
        self._categories[category.id] = category
        return category

    def delete_category(self, category_id: str) -> None:
        if category_id not in self._categories:
            raise NotFoundError(f"Category not found: {category_id}")
        del self._categories[category_id]

    def list_ideas(
        self,
        category: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        sort: str = "newest",
    ) -> List[Idea]:
        ideas = list(self._ideas.values())
        if category:
            ideas = [i for i in ideas if i.category == category]
        if status:
            ideas = [i for i in ideas if i.status == status]
        if priority:
            ideas = [i for i in ideas if i.priority == priority]
        return sort_ideas([_copy(i) for i in ideas], sort)

    def get_idea(self, idea_id: str) -> Idea:
        idea = self._ideas.get(idea_id)
        if idea is None:
            raise NotFoundError(f"Idea not found: {idea_id}")
        return _copy(idea)

    def create_idea(self, fields: Dict[str, Any]) -> Idea:
        now = utcnow()
        data = {key: value for key, value in fields.items() if key in IDEA_CREATE_FIELDS}
        idea = Idea.from_dict({
            **data,
            "id": str(uuid.uuid4()),
            "created_at": now,
            "updated_at": now,
        })
        self._ideas[idea.id] = idea
        return _copy(idea)

    def update_idea(self, idea_id: str, changes: Dict[str, Any]) -> Idea:
        current = self.get_idea(idea_id)
        data = current.to_dict()
        data.update(updatable_fields(changes))
        data["updated_at"] = utcnow()
        idea = Idea.from_dict(data)
        self._ideas[idea_id] = idea
        return _copy(idea)

    def delete_idea(self, idea_id: str) -> None:
        if idea_id not in self._ideas:
            raise NotFoundError(f"Idea not found: {idea_id}")
        del self._ideas[idea_id]

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._categories.clear()
        self._ideas.clear()

    def count(self) -> int:
        """Return number of stored ideas (for testing)."""
        return len(self._ideas)
