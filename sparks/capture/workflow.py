"""
Capture Workflow.

Orchestrates a capture from raw text to a stored idea:

    raw text → Normalizer → Draft (AIResult) → user review → Idea

Steps:
1. create_draft: ask the normalizer for a suggestion
2. accept_category: store a newly suggested category if the user accepts it
3. confirm_idea: validate the reviewed fields and persist the idea

Also covers the edit/delete actions of the idea detail view. Nothing here
retries; every failure is raised to the caller, which shows user_message().
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union

from sparks.errors import ValidationError
from sparks.models.ai_result import AIResult
from sparks.models.idea import (
    Category,
    Idea,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    MAX_TAGS,
    PRIORITIES,
    STATUSES,
)
from sparks.services.normalizer import IdeaNormalizer
from sparks.storage.base import IMMUTABLE_IDEA_FIELDS, Storage
from sparks.views.filters import ViewFilters

logger = logging.getLogger(__name__)


REQUIRED_IDEA_FIELDS = ("raw_input", "title", "summary", "category")


@dataclass
class Draft:
    """A normalizer suggestion awaiting review, plus the text it came from."""
    raw_input: str
    result: AIResult

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data["raw_input"] = self.raw_input
        return data


def clean_tags(tags: Union[str, List[Any], None]) -> List[str]:
    """
    Normalize user-edited tags.

    Accepts a list of strings or a comma-separated string. Each tag is
    trimmed and lowercased, blanks are dropped and at most MAX_TAGS are kept.

    Raises:
        ValidationError: tags is neither, or the list holds non-text items.
    """
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    elif not isinstance(tags, list):
        raise ValidationError("tags must be a list or comma-separated text", fields=["tags"])
    tags = [tag for tag in tags if tag is not None]
    if not all(isinstance(tag, str) for tag in tags):
        raise ValidationError("tags must contain only text", fields=["tags"])
    cleaned = [tag.strip().lower() for tag in tags]
    return [tag for tag in cleaned if tag][:MAX_TAGS]


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _require_text(payload: Dict[str, Any], names: Iterable[str]) -> None:
    """Reject present, non-null values that are not strings."""
    wrong = [
        name for name in names
        if payload.get(name) is not None and not isinstance(payload[name], str)
    ]
    if wrong:
        raise ValidationError(f"Fields must be text: {', '.join(wrong)}", fields=wrong)


class CaptureWorkflow:
    """Draft, review and persist ideas against an injected store and normalizer."""

    def __init__(self, storage: Storage, normalizer: IdeaNormalizer):
        self.storage = storage
        self.normalizer = normalizer

    # =========================================================================
    # Capture
    # =========================================================================

    def create_draft(self, raw_text: str) -> Draft:
        """
        Run the normalizer on raw text.

        Raises:
            ValidationError: raw_text is blank.
            UpstreamError / RateLimitError / MalformedResponseError: from the normalizer.
            StoreError: the category list could not be loaded.
        """
        if _is_blank(raw_text):
            raise ValidationError("rawInput is required", fields=["rawInput"])

        raw_text = raw_text.strip()
        categories = self.storage.category_names()
        result = self.normalizer.normalize(raw_text, categories)

        logger.info(
            "Draft created: %r in %r%s",
            result.title, result.category, " (new category)" if result.is_new_category else "",
        )
        return Draft(raw_input=raw_text, result=result)

    def accept_category(self, name: str) -> Category:
        """Store a category the user accepted. Not re-checked with the model."""
        _require_text({"name": name}, ["name"])
        if _is_blank(name):
            raise ValidationError("name is required", fields=["name"])

        category = self.storage.create_category(name.strip())
        logger.info("Category created: %r", category.name)
        return category

    def confirm_idea(self, draft_fields: Dict[str, Any]) -> Idea:
        """
        Persist a reviewed draft as a new active idea.

        Args:
            draft_fields: raw_input, title, summary, category, and optionally
                tags (list or comma-separated string) and priority.

        Raises:
            ValidationError: A required field is missing, blank or not text,
                or tags are malformed.
        """
        _require_text(draft_fields, REQUIRED_IDEA_FIELDS)
        missing = [name for name in REQUIRED_IDEA_FIELDS if _is_blank(draft_fields.get(name))]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", fields=missing)

        priority = draft_fields.get("priority")
        if priority not in PRIORITIES:
            priority = DEFAULT_PRIORITY

        idea = self.storage.create_idea({
            "raw_input": draft_fields["raw_input"],
            "title": draft_fields["title"].strip(),
            "summary": draft_fields["summary"].strip(),
            "category": draft_fields["category"].strip(),
            "tags": clean_tags(draft_fields.get("tags")),
            "priority": priority,
            "status": DEFAULT_STATUS,
            "notes": None,
        })

        logger.info("Idea saved: %s", idea.id)
        return idea

    # =========================================================================
    # Browse and edit
    # =========================================================================

    def list_categories(self) -> List[Category]:
        return self.storage.list_categories()

    def delete_category(self, category_id: str) -> None:
        self.storage.delete_category(category_id)

    def list_ideas(self, filters: Optional[ViewFilters] = None) -> List[Idea]:
        """Fetch ideas using the store's equality filters and ordering."""
        if filters is None:
            filters = ViewFilters(status=None)
        return self.storage.list_ideas(
            category=filters.category or None,
            status=filters.status or None,
            priority=filters.priority or None,
            sort=filters.sort,
        )

    def edit_idea(self, idea_id: str, changes: Dict[str, Any]) -> Idea:
        """
        Apply edits from the detail view.

        raw_input and store-managed fields are dropped from the payload.

        Raises:
            ValidationError: Blank or non-text title/summary/category,
                non-text notes, malformed tags or an unknown priority/status value.
            NotFoundError: No idea with this id.
        """
        payload = {key: value for key, value in changes.items() if key not in IMMUTABLE_IDEA_FIELDS}
        _require_text(payload, ("title", "summary", "category", "notes"))
        errors = []

        for name in ("title", "summary", "category"):
            if name in payload:
                if _is_blank(payload[name]):
                    errors.append(name)
                else:
                    payload[name] = payload[name].strip()

        if errors:
            raise ValidationError(f"Fields cannot be empty: {', '.join(errors)}", fields=errors)

        if "priority" in payload and payload["priority"] not in PRIORITIES:
            raise ValidationError(
                f"priority must be one of {', '.join(PRIORITIES)}", fields=["priority"]
            )

        if "status" in payload and payload["status"] not in STATUSES:
            raise ValidationError(
                f"status must be one of {', '.join(STATUSES)}", fields=["status"]
            )

        if "tags" in payload:
            payload["tags"] = clean_tags(payload["tags"])

        if "notes" in payload and _is_blank(payload["notes"]):
            payload["notes"] = None

        idea = self.storage.update_idea(idea_id, payload)
        logger.info("Idea updated: %s", idea_id)
        return idea

    def delete_idea(self, idea_id: str) -> None:
        self.storage.delete_idea(idea_id)
        logger.info("Idea deleted: %s", idea_id)
