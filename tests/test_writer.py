"""
Derivative Writer Tests

Run with: pytest tests/test_writer.py -v
"""

from unittest.mock import Mock

import pytest

from xslt_derivative import DerivativeWriter, WriteError, build_storage_uri
from xslt_derivative.host import MediaService, StorageError
from xslt_derivative.writer import guess_mime_type


class TestStorageUri:
    """Tests for scheme://path construction."""

    def test_build(self):
        """Scheme and path are joined with ://."""
        assert build_storage_uri("fedora", "42_out.html") == "fedora://42_out.html"

    def test_distinct_pairs_do_not_collide(self):
        """Different (scheme, path) pairs give different locations."""
        pairs = [("public", "a/b.html"), ("public", "a/b.htm"), ("fedora", "a/b.html"),
                 ("pub", "lic/a/b.html"), ("s3", "/a/b.html")]
        uris = {build_storage_uri(scheme, path) for scheme, path in pairs}
        assert len(uris) == len(pairs)

    @pytest.mark.parametrize("scheme", ["", "9public", "pub://lic", "has space"])
    def test_invalid_scheme(self, scheme):
        """Malformed schemes are rejected."""
        with pytest.raises(WriteError):
            build_storage_uri(scheme, "out.html")

    def test_empty_path(self):
        """An empty expanded path is rejected."""
        with pytest.raises(WriteError, match="empty"):
            build_storage_uri("public", "  ")


class TestMimeType:
    """Tests for MIME type selection."""

    def test_declared_wins(self):
        assert guess_mime_type("out.html", "application/xhtml+xml") == "application/xhtml+xml"

    def test_from_extension(self):
        assert guess_mime_type("2024-03/42.HTML") == "text/html"
        assert guess_mime_type("42.xml") == "application/xml"

    def test_unknown_extension(self):
        assert guess_mime_type("42.bin") == "application/octet-stream"


class TestDerivativeWriter:
    """Tests for writing through the media service."""

    def test_write_creates_media(self, media, store, node, dest_term):
        """Bytes land at scheme://path and the media is tagged."""
        created = DerivativeWriter(media).write(
            node, "document", dest_term, b"<b>hi</b>", "text/html", "fedora", "42_out.html"
        )
        assert created.bundle == "document"
        assert dest_term.tid in created.term_ids
        assert store.read("fedora://42_out.html") == b"<b>hi</b>"
        assert store.load(created.file_id).filemime == "text/html"

    def test_stream_released(self, node, dest_term):
        """The stream handed to storage is closed after the write."""
        service = Mock(spec=MediaService)
        streams = []
        service.put_to_node.side_effect = lambda *args: streams.append(args[3]) or Mock(mid=1)

        DerivativeWriter(service).write(node, "document", dest_term, b"x", "text/plain", "public", "x.txt")

        assert streams[0].closed
        service.put_to_node.assert_called_once()
        assert service.put_to_node.call_args[0][5] == "public://x.txt"

    def test_storage_failure(self, node, dest_term):
        """Storage errors surface as WriteError with the storage message."""
        service = Mock(spec=MediaService)
        service.put_to_node.side_effect = StorageError("disk full")

        with pytest.raises(WriteError, match="disk full"):
            DerivativeWriter(service).write(node, "document", dest_term, b"x", "text/plain", "public", "x.txt")

    def test_os_error_wrapped(self, node, dest_term):
        """Filesystem errors from the media service become WriteError."""
        service = Mock(spec=MediaService)
        service.put_to_node.side_effect = PermissionError("read-only")

        with pytest.raises(WriteError, match="read-only"):
            DerivativeWriter(service).write(node, "document", dest_term, b"x", "text/plain", "public", "x.txt")

    def test_programming_errors_propagate(self, node, dest_term):
        """Errors unrelated to storage are not disguised as WriteError."""
        service = Mock(spec=MediaService)
        service.put_to_node.side_effect = TypeError("bad argument")

        with pytest.raises(TypeError, match="bad argument"):
            DerivativeWriter(service).write(node, "document", dest_term, b"x", "text/plain", "public", "x.txt")
