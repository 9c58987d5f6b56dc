"""
Data models module.

Defines the persisted Idea and Category records and the ephemeral AIResult.
"""

from sparks.models.idea import (
    Idea,
    Category,
    PRIORITIES,
    STATUSES,
    PRIORITY_RANK,
    MAX_TAGS,
)
from sparks.models.ai_result import AIResult

__all__ = [
    "Idea",
    "Category",
    "AIResult",
    "PRIORITIES",
    "STATUSES",
    "PRIORITY_RANK",
    "MAX_TAGS",
]
