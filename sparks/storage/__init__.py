"""
Storage module.

Handles persistence and retrieval of ideas and categories via Supabase or
an in-memory backend.
"""

from sparks.config import STORAGE_BACKEND
from sparks.storage.base import Storage
from sparks.storage.memory import MemoryStorage
from sparks.storage.supabase import SupabaseStorage


def build_storage(backend: str = None) -> Storage:
    """
    Construct the configured storage backend.

    Args:
        backend: "supabase" or "memory". Defaults to config.STORAGE_BACKEND.
    """
    backend = (backend or STORAGE_BACKEND).lower()
    if backend == "memory":
        return MemoryStorage()
    if backend == "supabase":
        return SupabaseStorage()
    raise ValueError(f"Unknown storage backend: {backend!r}")


__all__ = [
    "Storage",
    "MemoryStorage",
    "SupabaseStorage",
    "build_storage",
]
