"""Pytest fixtures for wagtail-requirements tests."""

from unittest import mock

import pytest

from wagtail_requirements.backend import RequirementsBackend
from wagtail_requirements.combiners.passthrough import PassthroughCombiner


@pytest.fixture
def sample_document():
    """Minimal HTML document with head and body."""
    return "<html><head></head><body></body></html>"


@pytest.fixture
def sample_document_with_content():
    """HTML document with a title and body content."""
    return (
        "<!DOCTYPE html>"
        "<html><head><title>Test</title></head>"
        '<body class="home"><p>Hello</p></body></html>'
    )


@pytest.fixture
def backend():
    """Backend with default placement and no combining."""
    return RequirementsBackend(
        custom_tags_first=False,
        force_js_to_bottom=False,
        write_js_to_body=False,
        themes=["themes/simple", "blog:"],
        combiner=PassthroughCombiner(),
    )


@pytest.fixture
def mock_storage():
    """Mock combined file storage backend."""
    storage = mock.Mock()
    storage.save.return_value = "/media/_combinedfiles/site-abcd1234.css"
    storage.url.return_value = "/media/_combinedfiles/site-abcd1234.css"
    storage.exists.return_value = False
    return storage
