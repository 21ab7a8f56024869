"""Request-scoped registry of CSS/JS requirements and the HTML injector."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Literal

from .conf import get_setting
from .html import (
    create_tag,
    has_head_close,
    insert_at_bottom,
    insert_into_body,
    insert_into_head,
)
from .resources import (
    ThemeResourceLoader,
    is_remote_url,
    is_root_relative_url,
    path_for_file,
    read_file,
    resolve_path,
)
from .utils import get_combiner, get_storage

logger = logging.getLogger(__name__)

DEFAULT_SCRIPT_TYPE = "application/javascript"

PreloadKind = Literal["style", "script"]


class ResourceNotFound(ValueError):
    """A themed requirement matched no file in any theme."""


@dataclass
class StylesheetRequirement:
    media: str | None = None
    integrity: str | None = None
    crossorigin: str | None = None


@dataclass
class ScriptRequirement:
    async_: bool = False
    defer: bool = False
    type: str | None = None
    integrity: str | None = None
    crossorigin: str | None = None

    def merge(self, other: ScriptRequirement) -> None:
        """Fold a repeated registration of the same file into this one.

        ``async_`` and ``defer`` stay set once any registration asked for
        them. An explicit ``type`` replaces the previous one, while
        ``integrity`` and ``crossorigin`` always take the latest value.
        """
        self.async_ = self.async_ or other.async_
        self.defer = self.defer or other.defer
        if other.type:
            self.type = other.type
        self.integrity = other.integrity
        self.crossorigin = other.crossorigin


@dataclass(frozen=True)
class PreloadAsset:
    file: str
    kind: PreloadKind


class RequirementsBackend:
    """Collect requirements while a page renders, then inject them.

    One instance lives for one request. Templates and hooks register files
    and literal blocks; :meth:`inject_into` then writes the resulting tags
    into the finished document and sets the ``Link`` preload header.

    Options not passed to the constructor are read from the
    ``WAGTAIL_REQUIREMENTS`` setting.
    """

    def __init__(
        self,
        *,
        custom_tags_first: bool | None = None,
        force_js_to_bottom: bool | None = None,
        write_js_to_body: bool | None = None,
        themes: Iterable[str] | None = None,
        combiner: Any = None,
        storage: Any = None,
        combined_files_folder: str | None = None,
        theme_loader: ThemeResourceLoader | None = None,
    ) -> None:
        self.custom_tags_first = bool(
            get_setting("CUSTOM_TAGS_FIRST")
            if custom_tags_first is None
            else custom_tags_first
        )
        self.force_js_to_bottom = bool(
            get_setting("FORCE_JS_TO_BOTTOM")
            if force_js_to_bottom is None
            else force_js_to_bottom
        )
        self.write_js_to_body = bool(
            get_setting("WRITE_JS_TO_BODY")
            if write_js_to_body is None
            else write_js_to_body
        )
        self.themes: list[str] = list(
            get_setting("THEMES") if themes is None else themes
        )
        self.combined_files_folder: str | None = (
            get_setting("COMBINED_FILES_FOLDER")
            if combined_files_folder is None
            else combined_files_folder
        )
        self._combiner = combiner
        self._storage = storage
        self.theme_loader = theme_loader or ThemeResourceLoader()

        self.css: dict[str, StylesheetRequirement] = {}
        self.javascript: dict[str, ScriptRequirement] = {}
        self.provided_javascript: dict[str, list[str]] = {}
        self.custom_css: dict[Any, str] = {}
        self.custom_script: dict[Any, str] = {}
        self.custom_head_tags: dict[Any, str] = {}
        self.blocked: set[str] = set()
        self.preload: list[PreloadAsset] = []
        self._anonymous_ids = itertools.count()

    @property
    def combiner(self) -> Any:
        if self._combiner is None:
            self._combiner = get_combiner()
        return self._combiner

    @property
    def storage(self) -> Any:
        if self._storage is None:
            self._storage = get_storage()
        return self._storage

    # -- Registration ------------------------------------------------------

    def register_stylesheet(
        self,
        file: str | None,
        media: str | None = None,
        *,
        integrity: str | None = None,
        crossorigin: str | None = None,
        preload: bool = False,
        push: bool = False,
        inline: bool = False,
    ) -> None:
        """Register a stylesheet, linked by default.

        ``inline`` embeds the file's contents in a ``<style>`` block instead
        (remote and root-relative files are linked regardless). ``preload``
        adds a ``<link rel="preload">`` head tag straight away and ``push``
        queues the file for the ``Link`` response header.
        """
        resolved = resolve_path(file)
        if resolved is None:
            logger.debug("Ignoring unresolvable stylesheet %r", file)
            return

        if inline:
            if not (is_remote_url(resolved) or is_root_relative_url(resolved)):
                contents = read_file(resolved)
                if contents is None:
                    logger.debug("Inline stylesheet %s not found", resolved)
                else:
                    self.add_custom_css(contents)
                return

        self.css[resolved] = StylesheetRequirement(
            media=media, integrity=integrity, crossorigin=crossorigin
        )

        if preload:
            tag = create_tag(
                "link",
                {
                    "rel": "preload",
                    "as": "style",
                    "type": "text/css",
                    "href": path_for_file(resolved),
                },
            )
            self.insert_head_tags(tag, unique_id=tag)

        if push:
            self.preload.append(PreloadAsset(resolved, "style"))

    def register_script(
        self,
        file: str | None,
        *,
        type: str | None = None,
        async_: bool = False,
        defer: bool = False,
        integrity: str | None = None,
        crossorigin: str | None = None,
        preload: bool = False,
        push: bool = False,
        inline: bool = False,
        provides: Iterable[str] | None = None,
    ) -> None:
        """Register a script, rendered as ``<script src>`` by default.

        Registering the same file again merges the options into the existing
        entry. ``provides`` lists files bundled into this one, which are then
        not rendered on their own.
        """
        resolved = resolve_path(file)
        if resolved is None:
            logger.debug("Ignoring unresolvable script %r", file)
            return

        if inline:
            if not (is_remote_url(resolved) or is_root_relative_url(resolved)):
                contents = read_file(resolved)
                if contents is None:
                    logger.debug("Inline script %s not found", resolved)
                else:
                    self.add_custom_script(contents)
                return

        requirement = ScriptRequirement(
            async_=bool(async_),
            defer=bool(defer),
            type=type,
            integrity=integrity,
            crossorigin=crossorigin,
        )
        existing = self.javascript.get(resolved)
        if existing is None:
            self.javascript[resolved] = requirement
        else:
            existing.merge(requirement)

        if preload:
            tag = create_tag(
                "link",
                {
                    "rel": "preload",
                    "as": "script",
                    "type": DEFAULT_SCRIPT_TYPE,
                    "href": path_for_file(resolved),
                },
            )
            self.insert_head_tags(tag, unique_id=tag)

        if push:
            self.preload.append(PreloadAsset(resolved, "script"))

        if provides is not None:
            self.provided_javascript[resolved] = [
                resolve_path(f) or f for f in provides
            ]

    def register_themed_stylesheet(
        self, name: str, media: str | None = None, **options: Any
    ) -> None:
        """Register ``css/<name>.css`` from the first theme that has it."""
        path = self.theme_loader.find_themed_css(name, self.themes)
        if path is None:
            raise ResourceNotFound(
                f"The css file doesn't exist. Please check if the file {name}.css "
                "exists in any theme or search for themed stylesheet references "
                "calling this file in your templates."
            )
        self.register_stylesheet(path, media, **options)

    def register_themed_script(
        self, name: str, script_type: str | None = None, **options: Any
    ) -> None:
        """Register ``javascript/<name>.js`` or ``js/<name>.js`` from a theme.

        A ``type`` passed in ``options`` takes precedence over ``script_type``.
        """
        path = self.theme_loader.find_themed_javascript(name, self.themes)
        if path is None:
            raise ResourceNotFound(
                f"The javascript file doesn't exist. Please check if the file "
                f"{name}.js exists in any theme or search for themed script "
                "references calling this file in your templates."
            )
        merged: dict[str, Any] = {"type": script_type} if script_type else {}
        merged.update(options)
        self.register_script(path, **merged)

    def add_custom_css(self, css: str, unique_id: Any = None) -> None:
        self._add_custom(self.custom_css, css, unique_id)

    def add_custom_script(self, script: str, unique_id: Any = None) -> None:
        self._add_custom(self.custom_script, script, unique_id)

    def insert_head_tags(self, html: str, unique_id: Any = None) -> None:
        """Add literal markup (``<meta>``, ``<link>``...) to the head."""
        self._add_custom(self.custom_head_tags, html, unique_id)

    def _add_custom(self, target: dict[Any, str], value: str, unique_id: Any) -> None:
        if unique_id is None:
            unique_id = ("anonymous", next(self._anonymous_ids))
        target[unique_id] = value

    def block(self, file_or_id: Any) -> None:
        """Prevent a file or uniquely identified block from being rendered."""
        self.blocked.add(self._block_key(file_or_id))

    def unblock(self, file_or_id: Any) -> None:
        self.blocked.discard(self._block_key(file_or_id))

    def unblock_all(self) -> None:
        self.blocked.clear()

    def _block_key(self, file_or_id: Any) -> Any:
        # Only registered files are keyed by their resolved path
        if isinstance(file_or_id, str):
            resolved = resolve_path(file_or_id)
            if resolved in self.css or resolved in self.javascript:
                return resolved
        return file_or_id

    def clear(self) -> None:
        """Forget every registered requirement."""
        self.css.clear()
        self.javascript.clear()
        self.provided_javascript.clear()
        self.custom_css.clear()
        self.custom_script.clear()
        self.custom_head_tags.clear()
        self.preload.clear()

    # -- Accessors ---------------------------------------------------------

    def get_css(self) -> dict[str, StylesheetRequirement]:
        return {
            file: req for file, req in self.css.items() if file not in self.blocked
        }

    def get_javascript(self) -> dict[str, ScriptRequirement]:
        """Registered scripts minus blocked ones and those bundled elsewhere."""
        provided: set[str] = set()
        for file, files in self.provided_javascript.items():
            if file in self.javascript and file not in self.blocked:
                provided.update(files)
        return {
            file: req
            for file, req in self.javascript.items()
            if file not in self.blocked and file not in provided
        }

    def get_custom_css(self) -> list[str]:
        return self._unblocked(self.custom_css)

    def get_custom_scripts(self) -> list[str]:
        return self._unblocked(self.custom_script)

    def get_custom_head_tags(self) -> list[str]:
        return self._unblocked(self.custom_head_tags)

    def _unblocked(self, collection: dict[Any, str]) -> list[str]:
        return [value for key, value in collection.items() if key not in self.blocked]

    def has_requirements(self) -> bool:
        return bool(
            self.css
            or self.javascript
            or self.custom_css
            or self.custom_script
            or self.custom_head_tags
        )

    # -- Injection ---------------------------------------------------------

    def inject_into(self, content: str, response: Any = None) -> str:
        """Write every registered requirement into an HTML document.

        Returns ``content`` unchanged when it has no ``</head>`` or nothing
        was registered. Stylesheets, inline CSS and custom head tags go
        before ``</head>``; scripts go to the head, the top of the body or
        the bottom of the body depending on the placement options. When
        files were registered with ``push``, a ``Link`` header is set on
        ``response``.
        """
        if not has_head_close(content) or not self.has_requirements():
            return content

        requirements = ""
        js_requirements = ""

        if self.custom_tags_first:
            requirements += self._render_custom_head_tags()

        # May rewrite self.css and self.javascript
        self.combiner.process(self)

        for file, script in self.get_javascript().items():
            js_requirements += self.render_script_tag(file, script) + "\n"

        # Inline scripts come after the files they may depend on
        for script in self.get_custom_scripts():
            js_requirements += (
                create_tag(
                    "script",
                    {"type": DEFAULT_SCRIPT_TYPE},
                    f"//<![CDATA[\n{script}\n//]]>",
                )
                + "\n"
            )

        for file, stylesheet in self.get_css().items():
            requirements += self.render_stylesheet_tag(file, stylesheet) + "\n"

        for css in self.get_custom_css():
            requirements += create_tag("style", {"type": "text/css"}, f"\n{css}\n") + "\n"

        if not self.custom_tags_first:
            requirements += self._render_custom_head_tags()

        content = insert_into_head(requirements, content)

        if self.force_js_to_bottom:
            content = insert_at_bottom(js_requirements, content)
        elif self.write_js_to_body:
            content = insert_into_body(js_requirements, content)
        else:
            content = insert_into_head(js_requirements, content)

        if response is not None:
            self.add_preload_headers(response)

        return content

    def render_script_tag(self, file: str, script: ScriptRequirement) -> str:
        return create_tag(
            "script",
            {
                "type": script.type or DEFAULT_SCRIPT_TYPE,
                "src": path_for_file(file),
                "async": "async" if script.async_ else None,
                "defer": "defer" if script.defer else None,
                "integrity": script.integrity,
                "crossorigin": script.crossorigin,
            },
        )

    def render_stylesheet_tag(
        self, file: str, stylesheet: StylesheetRequirement
    ) -> str:
        return create_tag(
            "link",
            {
                "rel": "stylesheet",
                "type": "text/css",
                "href": path_for_file(file),
                "media": stylesheet.media,
                "integrity": stylesheet.integrity,
                "crossorigin": stylesheet.crossorigin,
            },
        )

    def _render_custom_head_tags(self) -> str:
        return "".join(f"{tag}\n" for tag in self.get_custom_head_tags())

    def preload_header(self) -> str:
        """Build the ``Link`` header value for pushed files, or ''."""
        return ",".join(
            f"<{path_for_file(asset.file)}>; rel=preload; as={asset.kind}"
            for asset in self.preload
        )

    def add_preload_headers(self, response: Any) -> None:
        value = self.preload_header()
        if value:
            response["Link"] = value

    # -- Combined files ----------------------------------------------------

    def purge_combined_assets(self) -> None:
        """Delete every combined file written to the combined files folder."""
        folder = self.combined_files_folder
        storage = self.storage
        if folder and storage:
            logger.info("Purging combined files in %s", folder)
            storage.delete_folder(folder)
