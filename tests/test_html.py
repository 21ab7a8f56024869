"""Tests for wagtail_requirements.html tag construction and splicing."""

import pytest

from wagtail_requirements.html import (
    create_tag,
    has_head_close,
    insert_at_bottom,
    insert_into_body,
    insert_into_head,
)


class TestCreateTag:
    def test_attributes_rendered_in_given_order(self):
        """Attributes keep the order of the mapping.

        Purpose: Verify deterministic attribute ordering in rendered tags.
        Category: Normal case
        Target: create_tag(tag, attributes)
        Technique: Equivalence partitioning
        Test data: Script tag with type and src
        """
        result = create_tag("script", {"type": "application/javascript", "src": "/a.js"})

        assert result == '<script type="application/javascript" src="/a.js"></script>'

    def test_empty_and_none_attributes_omitted(self):
        """Empty and None attribute values are left out.

        Purpose: Verify unset options never render as empty attributes.
        Category: Edge case
        Target: create_tag(tag, attributes)
        Technique: Boundary value analysis
        Test data: async=None and integrity=""
        """
        result = create_tag("script", {"src": "/a.js", "async": None, "integrity": ""})

        assert result == '<script src="/a.js"></script>'

    def test_void_element_has_no_closing_tag(self):
        """Void elements render without a closing tag.

        Purpose: Verify <link> is written as a void element.
        Category: Normal case
        Target: create_tag(tag, attributes)
        Technique: Equivalence partitioning (void tag)
        Test data: Stylesheet link
        """
        result = create_tag("link", {"rel": "stylesheet", "href": "/a.css"})

        assert result == '<link rel="stylesheet" href="/a.css">'

    def test_attribute_values_escaped(self):
        """Attribute values are HTML-escaped.

        Purpose: Verify that quotes, ampersands and angle brackets in values
            cannot break out of the attribute.
        Category: Error case
        Target: create_tag(tag, attributes)
        Technique: Error guessing (injection)
        Test data: Value containing every special character
        """
        result = create_tag("link", {"href": '/a.css?x=1&y="<b>"'})

        assert result == '<link href="/a.css?x=1&amp;y=&quot;&lt;b&gt;&quot;">'

    def test_content_inserted_verbatim(self):
        """Element content is written without escaping.

        Purpose: Verify CSS selectors like "a > b" survive.
        Category: Normal case
        Target: create_tag(tag, attributes, content)
        Technique: Equivalence partitioning (non-void tag)
        Test data: <style> with a child combinator
        """
        result = create_tag("style", {"type": "text/css"}, "a > b { color: red; }")

        assert result == '<style type="text/css">a > b { color: red; }</style>'


class TestHasHeadClose:
    @pytest.mark.parametrize(
        "content,expected",
        [
            ("<html><head></head></html>", True),
            ("<HTML><HEAD></HEAD></HTML>", True),
            ("<head></head >", True),
            ("<html><header></header></html>", False),
            ("<p>fragment</p>", False),
        ],
    )
    def test_detection(self, content, expected):
        """</head> is detected case-insensitively and not confused with </header>.

        Purpose: Verify the head anchor pattern.
        Category: Normal case
        Target: has_head_close(content)
        Technique: Equivalence partitioning
        Test data: Upper case, attribute space, header tag and fragment
        """
        assert has_head_close(content) is expected


class TestInsertIntoHead:
    def test_inserts_before_first_head_close(self):
        """Tags go right before the first </head>, later ones are ignored.

        Purpose: Verify first-match semantics when </head> appears twice.
        Category: Edge case
        Target: insert_into_head(tags, content)
        Technique: Boundary value analysis (multiple anchors)
        Test data: Document with </head> inside a body literal as well
        """
        content = "<head></head><body><pre></head></pre></body>"

        result = insert_into_head("<x>", content)

        assert result == "<head><x></head><body><pre></head></pre></body>"

    def test_no_anchor_returns_content(self):
        """Without </head> the content is returned unchanged.

        Purpose: Verify the missing-anchor case does not raise.
        Category: Edge case
        Target: insert_into_head(tags, content)
        Technique: Equivalence partitioning (no anchor)
        Test data: Fragment without a head
        """
        assert insert_into_head("<x>", "<p>no head</p>") == "<p>no head</p>"

    def test_empty_tags_returns_content(self):
        """Empty tags return the very same content object.

        Purpose: Verify nothing is spliced for an empty fragment.
        Category: Edge case
        Target: insert_into_head(tags, content)
        Technique: Boundary value analysis
        Test data: Empty tag string
        """
        content = "<head></head>"

        assert insert_into_head("", content) is content

    def test_replacement_text_not_interpreted(self):
        r"""Backslashes and group references in tags are kept literally."""
        result = insert_into_head(r"<script>a = '\1\\n';</script>", "<head></head>")

        assert result == r"<head><script>a = '\1\\n';</script></head>"


class TestInsertIntoBody:
    def test_inserts_after_opening_body_tag(self):
        """Tags go right after the opening body tag.

        Purpose: Verify the <body ...> anchor and its attributes are kept.
        Category: Normal case
        Target: insert_into_body(tags, content)
        Technique: Equivalence partitioning
        Test data: <body class="home">
        """
        content = '<head></head><body class="home"><p>x</p></body>'

        result = insert_into_body("<x>", content)

        assert result == '<head></head><body class="home"><x><p>x</p></body>'

    def test_falls_back_to_head_without_body(self):
        """Without <body> the tags go before </head>.

        Purpose: Verify the head fallback for body placement.
        Category: Edge case
        Target: insert_into_body(tags, content)
        Technique: Equivalence partitioning (no anchor)
        Test data: Document without a body tag
        """
        result = insert_into_body("<x>", "<head></head><p>x</p>")

        assert result == "<head><x></head><p>x</p>"

    def test_does_not_match_bodyguard_tag(self):
        """Tags whose name starts with "body" are not the body anchor.

        Purpose: Verify the word boundary in the body pattern.
        Category: Edge case
        Target: insert_into_body(tags, content)
        Technique: Error guessing
        Test data: <bodyguard> before <body>
        """
        content = "<head></head><bodyguard></bodyguard><body></body>"

        result = insert_into_body("<x>", content)

        assert result == "<head></head><bodyguard></bodyguard><body><x></body>"


class TestInsertAtBottom:
    def test_inserts_before_body_close(self):
        """Tags go right before </body>.

        Purpose: Verify bottom placement.
        Category: Normal case
        Target: insert_at_bottom(tags, content)
        Technique: Equivalence partitioning
        Test data: Document with a body
        """
        content = "<head></head><body><p>x</p></body></html>"

        result = insert_at_bottom("<x>", content)

        assert result == "<head></head><body><p>x</p><x></body></html>"

    def test_falls_back_to_head_without_body_close(self):
        """Without </body> the tags go before </head>.

        Purpose: Verify the head fallback for bottom placement.
        Category: Edge case
        Target: insert_at_bottom(tags, content)
        Technique: Equivalence partitioning (no anchor)
        Test data: Document without a body close tag
        """
        result = insert_at_bottom("<x>", "<head></head><p>x</p>")

        assert result == "<head><x></head><p>x</p>"
