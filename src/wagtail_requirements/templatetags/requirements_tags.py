"""Template tags for registering requirements while a template renders.

Usage::

    {% load requirements_tags %}
    {% require_css "css/site.css" media="screen" %}
    {% require_javascript "js/app.js" defer=True %}
    {% require_themed_css "layout" %}
    {% custom_script "menu-init" %}initMenu();{% endcustom_script %}

All tags output nothing; the middleware writes the tags into the page.
"""

from __future__ import annotations

import logging
from typing import Any

from django import template
from django.template.base import FilterExpression, NodeList, Parser, Token

from ..backend import RequirementsBackend
from ..middleware import get_requirements

logger = logging.getLogger(__name__)

register = template.Library()


def _get_backend(context: template.Context) -> RequirementsBackend | None:
    request = context.get("request")
    if request is None:
        logger.warning(
            "Requirement tag used without a request in the template context"
        )
        return None
    return get_requirements(request)


def _script_options(options: dict[str, Any]) -> dict[str, Any]:
    if "async" in options:
        options["async_"] = options.pop("async")
    provides = options.get("provides")
    if isinstance(provides, str):
        options["provides"] = [p.strip() for p in provides.split(",") if p.strip()]
    return options


@register.simple_tag(takes_context=True)
def require_css(
    context: template.Context, file: str, media: str | None = None, **options: Any
) -> str:
    backend = _get_backend(context)
    if backend is not None:
        backend.register_stylesheet(file, media, **options)
    return ""


@register.simple_tag(takes_context=True)
def require_javascript(context: template.Context, file: str, **options: Any) -> str:
    backend = _get_backend(context)
    if backend is not None:
        backend.register_script(file, **_script_options(options))
    return ""


@register.simple_tag(takes_context=True)
def require_themed_css(
    context: template.Context, name: str, media: str | None = None, **options: Any
) -> str:
    backend = _get_backend(context)
    if backend is not None:
        backend.register_themed_stylesheet(name, media, **options)
    return ""


@register.simple_tag(takes_context=True)
def require_themed_javascript(
    context: template.Context,
    name: str,
    script_type: str | None = None,
    **options: Any,
) -> str:
    backend = _get_backend(context)
    if backend is not None:
        backend.register_themed_script(name, script_type, **_script_options(options))
    return ""


@register.simple_tag(takes_context=True)
def require_head_tag(
    context: template.Context, html: str, unique_id: str | None = None
) -> str:
    backend = _get_backend(context)
    if backend is not None:
        backend.insert_head_tags(html, unique_id)
    return ""


@register.simple_tag(takes_context=True)
def block_requirement(context: template.Context, file_or_id: str) -> str:
    backend = _get_backend(context)
    if backend is not None:
        backend.block(file_or_id)
    return ""


class CustomRequirementNode(template.Node):
    """Register the rendered body of a block tag as inline CSS or JS."""

    def __init__(
        self, nodelist: NodeList, kind: str, unique_id: FilterExpression | None
    ) -> None:
        self.nodelist = nodelist
        self.kind = kind
        self.unique_id = unique_id

    def render(self, context: template.Context) -> str:
        backend = _get_backend(context)
        if backend is None:
            return ""
        content = self.nodelist.render(context).strip()
        if not content:
            return ""
        unique_id = self.unique_id.resolve(context) if self.unique_id else None
        if self.kind == "css":
            backend.add_custom_css(content, unique_id)
        else:
            backend.add_custom_script(content, unique_id)
        return ""


def _parse_custom_block(parser: Parser, token: Token, kind: str) -> CustomRequirementNode:
    bits = token.split_contents()
    tag_name = bits[0]
    if len(bits) > 2:
        raise template.TemplateSyntaxError(
            f"'{tag_name}' takes at most one argument (a unique id)"
        )
    unique_id = parser.compile_filter(bits[1]) if len(bits) == 2 else None
    nodelist = parser.parse((f"end{tag_name}",))
    parser.delete_first_token()
    return CustomRequirementNode(nodelist, kind, unique_id)


@register.tag
def custom_css(parser: Parser, token: Token) -> CustomRequirementNode:
    return _parse_custom_block(parser, token, "css")


@register.tag
def custom_script(parser: Parser, token: Token) -> CustomRequirementNode:
    return _parse_custom_block(parser, token, "js")
