"""Helpers for loading pluggable collaborators from settings."""

from __future__ import annotations

import hashlib
from importlib import import_module
from typing import Any

from .conf import get_setting


def get_combiner() -> Any:
    """Import and instantiate the configured combiner."""
    return import_class(get_setting("COMBINER"))()


def get_storage() -> Any:
    """Import and instantiate the configured storage backend."""
    storage_path = get_setting("STORAGE_BACKEND")
    cls = import_class(storage_path)
    return cls()


def import_class(dotted_path: str) -> type:
    """Import a class from a dotted path string."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = import_module(module_path)
    return getattr(module, class_name)  # type: ignore[no-any-return]


def compute_content_hash(content: str, length: int = 8) -> str:
    """Compute a short SHA-256 hash of content for combined filenames."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:length]
