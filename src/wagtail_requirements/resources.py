"""Static resource resolution: paths, URLs, file contents and themes."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from django.contrib.staticfiles import finders
from django.templatetags.static import static

logger = logging.getLogger(__name__)

_REMOTE_URL_RE = re.compile(r"^(//|https?:)", re.IGNORECASE)
_RESOURCE_RE = re.compile(r"^(?P<package>[\w.\-/]+):(?P<resource>.*)$")


def is_remote_url(path: str) -> bool:
    """True for protocol-relative and http(s) URLs."""
    return bool(_REMOTE_URL_RE.match(path))


def is_root_relative_url(path: str) -> bool:
    """True for paths anchored at the site root, e.g. ``/media/site.css``."""
    return path.startswith("/") and not path.startswith("//")


def resolve_path(file: str | None) -> str | None:
    """Resolve a requirement reference to a static path or URL.

    Accepts plain static paths (``css/site.css``), remote or root-relative
    URLs (returned as-is) and the ``package:resource`` form, which addresses
    a file in an app's namespaced static directory
    (``blog:css/post.css`` -> ``blog/css/post.css``).

    Returns None when nothing usable is left.
    """
    if not file:
        return None
    file = file.strip()
    if not file:
        return None
    if is_remote_url(file) or is_root_relative_url(file):
        return file

    match = _RESOURCE_RE.match(file)
    if match:
        package = match["package"].strip("/")
        resource = match["resource"].lstrip("/")
        file = f"{package}/{resource}" if resource else package

    if file.startswith("./"):
        file = file[2:]
    return file or None


def path_for_file(file: str) -> str:
    """Return the URL a resolved requirement is served from."""
    if is_remote_url(file) or is_root_relative_url(file):
        return file
    return static(file)


def read_file(path: str) -> str | None:
    """Read a static file's contents.

    Returns None when no finder locates the file or it is not UTF-8 text.
    """
    absolute = finders.find(path)
    if not absolute:
        logger.debug("Static file %s not found", path)
        return None
    try:
        return Path(absolute).read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.debug("Static file %s is not valid UTF-8", path)
        return None


class ThemeResourceLoader:
    """Find CSS/JS files by name across an ordered list of themes.

    Each theme is a static path prefix (``themes/simple``) or a
    ``package:`` reference to an app's static directory. Themes are searched
    in order, so listing an app last makes it the fallback.
    """

    css_dirs: tuple[str, ...] = ("css",)
    javascript_dirs: tuple[str, ...] = ("javascript", "js")

    def find_themed_css(self, name: str, themes: Iterable[str]) -> str | None:
        candidates = [f"{folder}/{name}.css" for folder in self.css_dirs]
        return self.find_themed_resource(candidates, themes)

    def find_themed_javascript(
        self, name: str, themes: Iterable[str]
    ) -> str | None:
        candidates = [f"{folder}/{name}.js" for folder in self.javascript_dirs]
        return self.find_themed_resource(candidates, themes)

    def find_themed_resource(
        self, candidates: list[str], themes: Iterable[str]
    ) -> str | None:
        """Return the first ``<theme>/<candidate>`` path that exists."""
        for theme in themes:
            prefix = resolve_path(theme) or ""
            for candidate in candidates:
                path = f"{prefix.rstrip('/')}/{candidate}" if prefix else candidate
                if finders.find(path):
                    return path
        return None
