"""
Services module.

Contains the completion service client and the idea normalizer built on it.
"""

from sparks.services.completion import CompletionClient
from sparks.services.normalizer import (
    IdeaNormalizer,
    build_system_prompt,
    parse_completion,
    sanitize_completion,
    strip_code_fence,
)

__all__ = [
    "CompletionClient",
    "IdeaNormalizer",
    "build_system_prompt",
    "parse_completion",
    "sanitize_completion",
    "strip_code_fence",
]
