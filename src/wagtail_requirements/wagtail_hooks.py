"""Wagtail hooks for page-level requirement registration."""

from __future__ import annotations

from typing import Any

from django.http import HttpRequest
from wagtail import hooks
from wagtail.models import Page

from .middleware import get_requirements

REGISTER_PAGE_REQUIREMENTS_HOOK = "register_page_requirements"


@hooks.register("before_serve_page")
def register_page_requirements(
    page: Page,
    request: HttpRequest,
    args: list[Any],
    kwargs: dict[str, Any],
) -> None:
    """Let apps register requirements for every served page.

    Functions registered under the ``register_page_requirements`` hook are
    called with the page and the request's requirements backend::

        @hooks.register("register_page_requirements")
        def add_analytics(page, requirements):
            requirements.register_script("js/analytics.js", async_=True)
    """
    requirements = get_requirements(request)
    for fn in hooks.get_hooks(REGISTER_PAGE_REQUIREMENTS_HOOK):
        fn(page, requirements)
