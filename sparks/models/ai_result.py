"""
AIResult: the structured suggestion produced by the normalizer.

Never persisted. It lives only while the user reviews and edits it, and is
discarded once accepted (turned into an Idea) or cancelled.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class AIResult:
    """Suggested idea fields extracted from raw text."""

    title: str
    summary: str
    category: str
    tags: list[str] = field(default_factory=list)
    priority: str = "normal"
    is_new_category: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape returned by the API (camel-case novelty flag)."""
        return {
            "title": self.title,
            "summary": self.summary,
            "category": self.category,
            "tags": list(self.tags),
            "priority": self.priority,
            "isNewCategory": self.is_new_category,
        }
