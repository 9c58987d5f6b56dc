"""
Idea Normalizer.

Turns raw captured text into an AIResult: builds the extraction
instruction, makes one completion call, strips any markdown code fence,
parses the JSON and sanitizes every field. The completion is untrusted free
text, so each field is checked and defaulted before use.
"""

import json
import logging
import re
from typing import Any, Dict, Sequence

from sparks.errors import MalformedResponseError
from sparks.models.ai_result import AIResult
from sparks.models.idea import DEFAULT_PRIORITY, MAX_TAGS, PRIORITIES
from sparks.services.completion import CompletionClient

logger = logging.getLogger(__name__)


_LEADING_FENCE = re.compile(r"^\s*```[A-Za-z0-9_-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```\s*$")


SYSTEM_PROMPT_TEMPLATE = """You are a personal idea organizer. Your job is to extract and structure raw thoughts into clean, organized entries.

Available categories: {categories}

Rules:
- Pick the most appropriate category from the list above
- If none fit well, suggest a new category name (short, title-case, 1-3 words)
- title: max 8 words, punchy and specific
- summary: 1-2 clean sentences capturing the core idea
- tags: up to 3 lowercase keyword strings (single words or short phrases)
- priority: "urgent" or "important" when the text contains urgency markers, deadlines or stated importance; otherwise "normal"

Respond with ONLY valid JSON (no markdown, no extra text):
{{
    "title": "...",
    "summary": "...",
    "category": "...",
    "tags": ["tag1", "tag2"],
    "priority": "normal"
}}"""


def build_system_prompt(known_categories: Sequence[str]) -> str:
    """Build the extraction instruction listing the known categories."""
    categories = ", ".join(known_categories) if known_categories else "(none yet)"
    return SYSTEM_PROMPT_TEMPLATE.format(categories=categories)


def strip_code_fence(text: str) -> str:
    """
    Remove a markdown code fence wrapped around a response.

    Handles a leading ``` optionally followed by a language tag (```json) and
    a trailing ```. Text without a fence comes back trimmed.
    """
    cleaned = _LEADING_FENCE.sub("", text, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_completion(text: str) -> Dict[str, Any]:
    """
    Decode the completion text into a dictionary.

    Raises:
        MalformedResponseError: If the text is not a JSON object.
    """
    cleaned = strip_code_fence(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedResponseError("AI returned invalid JSON", cleaned) from e

    if not isinstance(data, dict):
        raise MalformedResponseError("AI returned JSON that is not an object", cleaned)

    return data


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value.strip() if isinstance(value, str) else str(value)


def sanitize_completion(data: Dict[str, Any], known_categories: Sequence[str]) -> AIResult:
    """
    Coerce a decoded completion into a typed AIResult.

    - priority outside PRIORITIES (or missing) becomes "normal"
    - tags that are missing or not a list become [], otherwise the first 3
    - a missing category falls back to the first known category (not new)
    - is_new_category is a case-insensitive absence check against known_categories
    """
    priority = data.get("priority")
    if priority not in PRIORITIES:
        priority = DEFAULT_PRIORITY

    tags = data.get("tags")
    if isinstance(tags, list):
        tags = [_as_text(tag) for tag in tags[:MAX_TAGS]]
    else:
        tags = []

    category = data.get("category")
    if category is None:
        category = known_categories[0] if known_categories else ""
        is_new_category = False
    else:
        category = _as_text(category)
        known = {name.lower() for name in known_categories}
        is_new_category = category.lower() not in known

    return AIResult(
        title=_as_text(data.get("title")),
        summary=_as_text(data.get("summary")),
        category=category,
        tags=tags,
        priority=priority,
        is_new_category=is_new_category,
    )


class IdeaNormalizer:
    """Extracts a structured suggestion from raw text via the completion service."""

    def __init__(self, client: CompletionClient):
        self.client = client

    def is_available(self) -> bool:
        return self.client.is_available()

    def normalize(self, raw_text: str, known_categories: Sequence[str]) -> AIResult:
        """
        Turn raw text into an AIResult.

        Args:
            raw_text: The captured text, as typed or pasted by the user.
            known_categories: Names of the existing categories.

        Returns:
            AIResult with sanitized fields and the category novelty flag.

        Raises:
            UpstreamError: The completion service failed (RateLimitError on quota).
            MalformedResponseError: The response could not be parsed.
        """
        known_categories = list(known_categories)
        system_prompt = build_system_prompt(known_categories)
        user_message = f"Here is the raw input to process:\n\n{raw_text}"

        text = self.client.complete(system_prompt, user_message)
        data = parse_completion(text)
        result = sanitize_completion(data, known_categories)

        logger.debug(
            "Normalized capture into %r (category=%r, new=%s, priority=%s)",
            result.title, result.category, result.is_new_category, result.priority,
        )
        return result
