"""
Core data model for Sparks.

Defines the Idea and Category records held by the record store. An Idea is
the structured entry derived from a piece of captured text; a Category is a
named grouping label. Ideas reference categories by name, not by id, so
renaming or deleting a Category leaves existing Idea.category values as-is.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sparks.errors import ValidationError


PRIORITIES = ("normal", "important", "urgent")
STATUSES = ("active", "actioned", "archived")

PRIORITY_RANK = {"urgent": 3, "important": 2, "normal": 1}

MAX_TAGS = 3

DEFAULT_PRIORITY = "normal"
DEFAULT_STATUS = "active"


def utcnow() -> datetime:
    """Timezone-aware current time, matching what the hosted store returns."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from storage, tolerating a trailing 'Z'."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass
class Idea:
    """
    A persisted idea.

    Attributes:
        id: Opaque identifier assigned by the store.
        raw_input: The text the idea was captured from. Never updated.
        title: Short title (the model aims for at most 8 words).
        summary: One or two sentences.
        category: Name of a Category (by value).
        tags: Up to three lowercase tags.
        priority: One of PRIORITIES.
        status: One of STATUSES.
        notes: Optional free text added while editing.
        created_at: When the store created the record.
        updated_at: When the record was last changed.
    """

    id: str
    raw_input: str
    title: str
    summary: str
    category: str
    tags: list[str] = field(default_factory=list)
    priority: str = DEFAULT_PRIORITY
    status: str = DEFAULT_STATUS
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Check the enumerations and the tag limit.

        Raises:
            ValidationError: If any invariant is broken.
        """
        errors = []

        if self.priority not in PRIORITIES:
            errors.append(f"priority must be one of {', '.join(PRIORITIES)}, got {self.priority!r}")

        if self.status not in STATUSES:
            errors.append(f"status must be one of {', '.join(STATUSES)}, got {self.status!r}")

        if len(self.tags) > MAX_TAGS:
            errors.append(f"at most {MAX_TAGS} tags allowed, got {len(self.tags)}")

        if errors:
            raise ValidationError(f"Idea validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary with ISO-formatted timestamps, for JSON responses."""
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        data["updated_at"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Idea":
        """
        Build an Idea from a store row.

        Unknown keys are ignored; timestamps may be ISO strings.
        """
        return cls(
            id=str(data["id"]),
            raw_input=data.get("raw_input") or "",
            title=data.get("title") or "",
            summary=data.get("summary") or "",
            category=data.get("category") or "",
            tags=list(data.get("tags") or []),
            priority=data.get("priority") or DEFAULT_PRIORITY,
            status=data.get("status") or DEFAULT_STATUS,
            notes=data.get("notes"),
            created_at=parse_timestamp(data.get("created_at")) or utcnow(),
            updated_at=parse_timestamp(data.get("updated_at")) or utcnow(),
        )

    @property
    def priority_rank(self) -> int:
        return PRIORITY_RANK[self.priority]

    def __str__(self) -> str:
        return f"[{self.category}] {self.title} ({self.priority})"

    def __repr__(self) -> str:
        return (
            f"Idea(id={self.id!r}, title={self.title!r}, "
            f"category={self.category!r}, priority={self.priority!r}, status={self.status!r})"
        )


@dataclass
class Category:
    """A named grouping label for ideas."""

    id: str
    name: str
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            created_at=parse_timestamp(data.get("created_at")) or utcnow(),
        )

    def __str__(self) -> str:
        return self.name
