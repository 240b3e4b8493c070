"""
Path Token Expander Tests

Run with: pytest tests/test_tokens.py -v
"""

from datetime import datetime

import pytest

from xslt_derivative import ContentItem, MediaItem, PathTokenExpander, Term, TransformContext
from xslt_derivative.config import DEFAULT_DEST_PATH
from xslt_derivative.tokens import find_tokens, format_date


@pytest.fixture
def expander():
    return PathTokenExpander()


@pytest.fixture
def context():
    return TransformContext(
        node=ContentItem(nid=42, title="Finding aid", uuid="6f1c-42", type="collection"),
        media=MediaItem(mid=7, name="ead.xml", bundle="file", nid=42, file_id=3),
        term=Term(tid=2, name="Service File", uri="urn:dest"),
        timestamp=datetime(2024, 3, 7, 9, 5, 1),
    )


class TestExpand:
    """Tests for template expansion."""

    def test_node_id(self, expander, context):
        """[node:nid] should render the content item id."""
        assert expander.expand("[node:nid]_out.html", context) == "42_out.html"

    def test_default_template(self, expander, context):
        """The default destination template embeds year, month and node id."""
        assert expander.expand(DEFAULT_DEST_PATH, context) == "2024-03/42_transformed.html"

    def test_media_and_term_tokens(self, expander, context):
        """Media and term properties should resolve."""
        path = expander.expand("[term:tid]/[media:mid]-[media:bundle]/[term:name]", context)
        assert path == "2/7-file/Service File"

    def test_unresolved_tokens_become_empty(self, expander, context):
        """Unknown namespaces and properties render as empty strings."""
        assert expander.expand("a[node:nope][user:name]b", context) == "ab"

    def test_custom_date_with_space(self, expander, context):
        """Custom date formats may contain spaces."""
        assert expander.expand("[date:custom:Y m]/x", context) == "2024 03/x"

    def test_unknown_mixed_case_namespace(self, expander, context):
        """Namespaces outside the known set render empty regardless of case."""
        assert expander.expand("[date:custom:Y m]/[Node:nid]/x", context) == "2024 03//x"

    def test_missing_context_entity(self, expander):
        """Tokens for absent context entries render as empty strings."""
        context = TransformContext(node=ContentItem(nid=5), timestamp=datetime(2024, 1, 1))
        assert expander.expand("[media:mid]/[node:nid]", context) == "/5"

    def test_plain_text_untouched(self, expander, context):
        """Text without tokens passes through."""
        assert expander.expand("static/path.html", context) == "static/path.html"

    def test_pure(self, expander, context):
        """Repeated expansion yields the same path."""
        template = "[date:custom:Y/m/d-H:i:s]/[node:uuid]"
        assert expander.expand(template, context) == expander.expand(template, context)

    def test_replace_with_data_mapping(self, expander, context):
        """replace() accepts the raw token data mapping."""
        assert expander.replace("[node:title]", context.as_token_data()) == "Finding aid"


class TestDateFormats:
    """Tests for single-character date formats."""

    def test_custom_characters(self):
        """Known format characters should be replaced."""
        value = datetime(2024, 3, 7, 9, 5, 1)
        assert format_date(value, "Y-m-d H:i:s") == "2024-03-07 09:05:01"
        assert format_date(value, "y n j G") == "24 3 7 9"
        assert format_date(value, "D, M F l") == "Thu, Mar March Thursday"

    def test_escaped_character(self):
        """A backslash keeps the next character literal."""
        assert format_date(datetime(2024, 3, 7), r"\Y-Y") == "Y-2024"

    def test_presets(self, expander, context):
        """short/medium/long presets should render."""
        assert expander.expand("[date:short]", context) == "03/07/2024 - 09:05"
        assert expander.expand("[date:long]", context) == "Thursday, March 7, 2024 - 09:05"


class TestFindTokens:
    """Tests for token discovery."""

    def test_find_tokens(self):
        """Tokens should be listed in order."""
        assert find_tokens(DEFAULT_DEST_PATH) == [
            ("date", "custom:Y"),
            ("date", "custom:m"),
            ("node", "nid"),
        ]
