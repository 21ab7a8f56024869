"""Configuration and settings for wagtail-requirements."""

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    # Injection settings
    "CUSTOM_TAGS_FIRST": False,
    "FORCE_JS_TO_BOTTOM": False,
    "WRITE_JS_TO_BODY": False,
    # Static path prefixes searched by themed lookups, in priority order
    "THEMES": [],
    # Combiner settings
    "COMBINER": "wagtail_requirements.combiners.passthrough.PassthroughCombiner",
    "COMBINED_FILES": {},
    "COMBINED_FILES_FOLDER": "_combinedfiles",
    "MINIFY_COMBINED_FILES": True,
    # Storage settings
    "STORAGE_BACKEND": "wagtail_requirements.storage.django_storage.DjangoStorageBackend",
    # Combined file naming
    "HASH_LENGTH": 8,
}


_UNSET = object()


def get_setting(key: str, default: Any = _UNSET) -> Any:
    """Get a setting from WAGTAIL_REQUIREMENTS dict or return default."""
    user_settings: dict[str, Any] = getattr(settings, "WAGTAIL_REQUIREMENTS", {})
    fallback = DEFAULTS.get(key) if default is _UNSET else default
    return user_settings.get(key, fallback)
