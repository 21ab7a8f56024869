"""Tag construction and anchor-based insertion into HTML documents.

Documents are never parsed. Tags are spliced in at the first match of a
few anchor patterns (``</head>``, ``<body ...>``, ``</body>``), which keeps
the injection cheap and tolerant of whatever markup the templates emit.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from django.utils.html import format_html_join

HEAD_CLOSE_RE = re.compile(r"</head\b[^>]*>", re.IGNORECASE)
BODY_OPEN_RE = re.compile(r"<body\b[^>]*>", re.IGNORECASE)
BODY_CLOSE_RE = re.compile(r"</body\b[^>]*>", re.IGNORECASE)

VOID_ELEMENTS = frozenset({"base", "link", "meta"})


def create_tag(
    tag: str,
    attributes: Mapping[str, str | None],
    content: str | None = None,
) -> str:
    """Render a tag with escaped attributes in the given order.

    Attributes whose value is None or empty are left out. ``content`` is
    inserted verbatim, it is the caller's job to pass trusted markup.
    """
    rendered = format_html_join(
        "",
        ' {}="{}"',
        ((name, value) for name, value in attributes.items() if value),
    )
    if tag in VOID_ELEMENTS:
        return f"<{tag}{rendered}>"
    return f"<{tag}{rendered}>{content or ''}</{tag}>"


def has_head_close(content: str) -> bool:
    return HEAD_CLOSE_RE.search(content) is not None


def _splice(
    pattern: re.Pattern[str], tags: str, content: str, *, after: bool = False
) -> str | None:
    match = pattern.search(content)
    if match is None:
        return None
    index = match.end() if after else match.start()
    return content[:index] + tags + content[index:]


def insert_into_head(tags: str, content: str) -> str:
    """Insert tags immediately before the first ``</head>``."""
    if not tags:
        return content
    spliced = _splice(HEAD_CLOSE_RE, tags, content)
    return content if spliced is None else spliced


def insert_into_body(tags: str, content: str) -> str:
    """Insert tags right after the opening ``<body>`` tag.

    Falls back to the head when the document has no body tag.
    """
    if not tags:
        return content
    spliced = _splice(BODY_OPEN_RE, tags, content, after=True)
    return insert_into_head(tags, content) if spliced is None else spliced


def insert_at_bottom(tags: str, content: str) -> str:
    """Insert tags immediately before the first ``</body>``.

    Falls back to the head when the document has no closing body tag.
    """
    if not tags:
        return content
    spliced = _splice(BODY_CLOSE_RE, tags, content)
    return insert_into_head(tags, content) if spliced is None else spliced
