"""
Base storage abstraction for Sparks.

Defines the abstract interface that all record store backends must implement.
This allows swapping between the hosted Supabase store and the in-memory
store used for development and tests.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sparks.models.idea import Category, Idea


# Fields a caller may never change once an idea exists
IMMUTABLE_IDEA_FIELDS = ("id", "raw_input", "created_at", "updated_at")

# Fields accepted by create_idea
IDEA_CREATE_FIELDS = ("raw_input", "title", "summary", "category", "tags", "priority", "status", "notes")

# Fields accepted by update_idea
IDEA_UPDATE_FIELDS = ("title", "summary", "category", "tags", "priority", "status", "notes")


def updatable_fields(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the fields update_idea is allowed to write."""
    return {key: value for key, value in changes.items() if key in IDEA_UPDATE_FIELDS}


class Storage(ABC):
    """
    Abstract base class for all record store backends.

    Implementations hold two record types, Category and Idea, and provide:
    - listing (categories by name; ideas with equality filters and ordering)
    - insert, point update and point delete

    Failures raise StoreError; an unknown id raises NotFoundError.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the name of this storage backend.

        Used for logging and debugging.
        """
        pass

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_categories(self) -> List[Category]:
        """Return all categories ordered by name."""
        pass

    @abstractmethod
    def create_category(self, name: str) -> Category:
        """
        Insert a category.

        Uniqueness of the name is not enforced here.
        """
        pass

    @abstractmethod
    def delete_category(self, category_id: str) -> None:
        """
        Delete a category by id.

        Ideas referencing the category by name are left untouched.
        """
        pass

    # -------------------------------------------------------------------------
    # Ideas
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_ideas(
        self,
        category: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        sort: str = "newest",
    ) -> List[Idea]:
        """
        List ideas with optional equality filters.

        Args:
            category: Only ideas in this category.
            status: Only ideas with this status.
            priority: Only ideas with this priority.
            sort: "newest" (default), "oldest" or "priority".

        Returns:
            List of Idea instances in the requested order.
        """
        pass

    @abstractmethod
    def get_idea(self, idea_id: str) -> Idea:
        """Return a single idea or raise NotFoundError."""
        pass

    @abstractmethod
    def create_idea(self, fields: Dict[str, Any]) -> Idea:
        """
        Insert an idea.

        The store assigns id, created_at and updated_at.
        """
        pass

    @abstractmethod
    def update_idea(self, idea_id: str, changes: Dict[str, Any]) -> Idea:
        """
        Apply a partial update and return the updated idea.

        raw_input and the store-managed fields are never written.
        """
        pass

    @abstractmethod
    def delete_idea(self, idea_id: str) -> None:
        """Delete an idea by id."""
        pass

    def category_names(self) -> List[str]:
        """Names of all categories, ordered by name."""
        return [category.name for category in self.list_categories()]

    def __str__(self) -> str:
        return f"Storage({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
