"""
Term Resolver and Source Locator Tests

Run with: pytest tests/test_lookup.py -v
"""

import pytest

from xslt_derivative import (
    AmbiguousSourceError,
    NotFoundError,
    SourceLocator,
    StoredFile,
    Term,
    TermResolver,
)


class TestTermResolver:
    """Tests for URI <-> term translation."""

    def test_resolve(self, terms, source_term):
        """A known URI resolves to its term."""
        assert TermResolver(terms).resolve("urn:source") == source_term

    def test_resolve_unknown(self, terms):
        """An unknown URI raises NotFoundError naming the URI."""
        with pytest.raises(NotFoundError, match="urn:missing"):
            TermResolver(terms).resolve("urn:missing", "source term")

    def test_resolve_empty(self, terms):
        """An empty URI never resolves."""
        with pytest.raises(NotFoundError):
            TermResolver(terms).resolve("")

    def test_uri_of(self, terms, dest_term):
        """uri_of returns the term's URI."""
        assert TermResolver(terms).uri_of(dest_term) == "urn:dest"

    def test_uri_of_term_without_uri(self, terms):
        """A term with no URI cannot be stored portably."""
        bare = terms.add(Term(tid=9, name="No uri"))
        with pytest.raises(NotFoundError):
            TermResolver(terms).uri_of(bare)

    def test_load(self, terms, source_term):
        """Terms can be loaded by host id."""
        assert TermResolver(terms).load(1) == source_term
        with pytest.raises(NotFoundError):
            TermResolver(terms).load(404)


class TestSourceLocator:
    """Tests for source media and file lookup."""

    def test_locate(self, media, node, source_term, source_media, source_file):
        """The tagged media and its file are returned."""
        found_media, found_file = SourceLocator(media).locate(node, source_term)
        assert found_media.mid == source_media.mid
        assert found_file.uri == source_file.uri

    def test_no_media(self, media, node, source_term):
        """No tagged media raises NotFoundError about source media."""
        with pytest.raises(NotFoundError, match="source media") as excinfo:
            SourceLocator(media).locate(node, source_term)
        assert "file" not in str(excinfo.value)

    def test_other_term_ignored(self, media, node, dest_term, source_media):
        """Media tagged with another term is not a source."""
        with pytest.raises(NotFoundError):
            SourceLocator(media).locate(node, dest_term)

    def test_media_without_file(self, media, node, source_term):
        """A media whose file is gone raises NotFoundError about the file."""
        media.add_media(node, StoredFile(fid=999, uri="public://gone.xml"), source_term)
        with pytest.raises(NotFoundError, match="source media file"):
            SourceLocator(media).locate(node, source_term)

    def test_several_media_uses_lowest_id(self, media, store, node, source_term, source_media):
        """With several candidates the lowest media id wins."""
        other = store.create("public://source/other.xml", b"<a/>")
        media.add_media(node, other, source_term)
        found, _ = SourceLocator(media).locate(node, source_term)
        assert found.mid == source_media.mid

    def test_several_media_strict(self, media, store, node, source_term, source_media):
        """Strict mode refuses to choose."""
        other = store.create("public://source/other.xml", b"<a/>")
        media.add_media(node, other, source_term)
        with pytest.raises(AmbiguousSourceError):
            SourceLocator(media, strict=True).locate(node, source_term)
