"""
Capture module.

Turns raw text into reviewed, stored ideas.
"""

from sparks.capture.workflow import CaptureWorkflow, Draft, clean_tags

__all__ = [
    "CaptureWorkflow",
    "Draft",
    "clean_tags",
]
