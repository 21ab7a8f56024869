"""Combiner that merges configured groups of files into single bundles.

Bundles are declared in the ``COMBINED_FILES`` setting::

    WAGTAIL_REQUIREMENTS = {
        "COMBINER": "wagtail_requirements.combiners.bundle.BundleCombiner",
        "COMBINED_FILES": {
            "site.css": ["css/reset.css", "css/layout.css"],
            "site.js": ["js/menu.js", "js/search.js"],
        },
    }

Whenever at least one member of a bundle is registered, the registered
members are concatenated, optionally minified, written to the combined
files folder and replaced by a single entry for the written file.
"""

from __future__ import annotations

import logging
import posixpath
from typing import Any

import rcssmin
import rjsmin

from ..backend import RequirementsBackend, ScriptRequirement, StylesheetRequirement
from ..conf import get_setting
from ..resources import read_file, resolve_path
from ..utils import compute_content_hash, get_storage
from .base import BaseCombiner

logger = logging.getLogger(__name__)


class BundleCombiner(BaseCombiner):
    def __init__(
        self,
        bundles: dict[str, list[str]] | None = None,
        storage: Any = None,
        folder: str | None = None,
        minify: bool | None = None,
        hash_length: int | None = None,
    ) -> None:
        self.bundles: dict[str, list[str]] = (
            get_setting("COMBINED_FILES") if bundles is None else bundles
        )
        self._storage = storage
        self.folder: str = (
            get_setting("COMBINED_FILES_FOLDER") if folder is None else folder
        )
        self.minify: bool = (
            get_setting("MINIFY_COMBINED_FILES") if minify is None else minify
        )
        self.hash_length: int = (
            get_setting("HASH_LENGTH") if hash_length is None else hash_length
        )

    @property
    def storage(self) -> Any:
        if self._storage is None:
            self._storage = get_storage()
        return self._storage

    def process(self, backend: RequirementsBackend) -> None:
        for name, files in self.bundles.items():
            members = [resolve_path(f) or f for f in files]
            if name.endswith(".css"):
                self._combine(
                    backend.css,
                    backend.get_css(),
                    name,
                    members,
                    "css",
                    _merge_stylesheets,
                )
            elif name.endswith(".js"):
                combined = self._combine(
                    backend.javascript,
                    backend.get_javascript(),
                    name,
                    members,
                    "js",
                    _merge_scripts,
                )
                if combined is not None:
                    _carry_provided(backend, *combined)
            else:
                logger.warning("Ignoring bundle %s: unknown file type", name)

    def _combine(
        self,
        registry: dict[str, Any],
        renderable: dict[str, Any],
        name: str,
        members: list[str],
        asset_type: str,
        merge: Any,
    ) -> tuple[str, list[str]] | None:
        """Replace the renderable members of one bundle with the bundle file.

        Blocked and provided files are not renderable and stay in
        ``registry`` as they are. Stylesheets are only bundled with members
        sharing the first member's media.

        Returns the bundle URL and the files it replaced, or None when
        nothing was bundled.
        """
        bundled: list[str] = []
        contents: list[str] = []
        for file in members:
            if file not in renderable:
                continue
            if (
                asset_type == "css"
                and bundled
                and renderable[file].media != renderable[bundled[0]].media
            ):
                logger.warning(
                    "Combined file %s: member %s has media %r, leaving it unbundled",
                    name,
                    file,
                    renderable[file].media,
                )
                continue
            text = read_file(file)
            if text is None:
                logger.warning(
                    "Combined file %s: member %s not readable, leaving it unbundled",
                    name,
                    file,
                )
                continue
            bundled.append(file)
            contents.append(text)

        if not bundled:
            return None

        combined = "\n".join(contents)
        if self.minify:
            combined = _minify(combined, asset_type)

        url = self._publish(name, combined)
        entry = merge([registry[file] for file in bundled])

        rebuilt: dict[str, Any] = {}
        for file, requirement in registry.items():
            if file in bundled:
                rebuilt.setdefault(url, entry)
            else:
                rebuilt[file] = requirement
        registry.clear()
        registry.update(rebuilt)
        return url, bundled

    def _publish(self, name: str, content: str) -> str:
        """Write the bundle under a content-hashed name and return its URL."""
        stem, ext = posixpath.splitext(name)
        content_hash = compute_content_hash(content, self.hash_length)
        path = posixpath.join(self.folder, f"{stem}-{content_hash}{ext}")
        if self.storage.exists(path):
            return self.storage.url(path)  # type: ignore[no-any-return]
        url = self.storage.save(path, content)
        logger.info("Wrote combined file %s", path)
        return url  # type: ignore[no-any-return]


def _minify(content: str, asset_type: str) -> str:
    if asset_type == "css":
        return rcssmin.cssmin(content)  # type: ignore[no-any-return]
    return rjsmin.jsmin(content)  # type: ignore[no-any-return]


def _merge_stylesheets(
    requirements: list[StylesheetRequirement],
) -> StylesheetRequirement:
    return StylesheetRequirement(media=requirements[0].media)


def _merge_scripts(requirements: list[ScriptRequirement]) -> ScriptRequirement:
    return ScriptRequirement(
        async_=all(r.async_ for r in requirements),
        defer=all(r.defer for r in requirements),
        type=requirements[0].type,
    )


def _carry_provided(
    backend: RequirementsBackend, url: str, bundled: list[str]
) -> None:
    """Move ``provides`` lists of bundled scripts onto the bundle."""
    provided: list[str] = []
    for file in bundled:
        provided.extend(backend.provided_javascript.pop(file, []))
    if provided:
        backend.provided_javascript[url] = provided
