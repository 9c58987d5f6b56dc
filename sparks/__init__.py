"""
Sparks - personal idea capture.

Paste unstructured text, let a hosted language model extract a structured
entry, review it, and keep it for later browsing, filtering and editing.
"""

__version__ = "1.0.0"
