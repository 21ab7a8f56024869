"""Middleware that gives each request a requirements backend and injects it."""

from __future__ import annotations

import logging
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from .backend import RequirementsBackend

logger = logging.getLogger(__name__)

REQUEST_ATTRIBUTE = "requirements"


class RequirementsMiddleware:
    """Attach a fresh RequirementsBackend to every request.

    Templates, views and Wagtail hooks register requirements on
    ``request.requirements`` while the response renders. Once the view has
    returned, the registered tags are written into HTML responses.
    Streaming and non-HTML responses pass through untouched.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        backend = RequirementsBackend()
        setattr(request, REQUEST_ATTRIBUTE, backend)

        response = self.get_response(request)

        content_type = response.get("Content-Type", "")
        if "text/html" not in content_type:
            return response

        if getattr(response, "streaming", False):
            return response

        # A view may have replaced the backend (e.g. with a subclass)
        backend = getattr(request, REQUEST_ATTRIBUTE, backend)
        if not backend.has_requirements():
            return response

        charset = response.charset or "utf-8"
        content = response.content.decode(charset)
        injected = backend.inject_into(content, response)
        if injected == content:
            logger.debug("Nothing injected into response for %s", request.path)
            return response

        response.content = injected.encode(charset)
        response["Content-Length"] = len(response.content)

        return response


def get_requirements(request: HttpRequest) -> RequirementsBackend:
    """Return the request's backend, creating one if the middleware is absent."""
    backend = getattr(request, REQUEST_ATTRIBUTE, None)
    if backend is None:
        backend = RequirementsBackend()
        setattr(request, REQUEST_ATTRIBUTE, backend)
    return backend
