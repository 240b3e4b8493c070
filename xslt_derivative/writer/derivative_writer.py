"""
Derivative Writer
=================

Persists transform output as a new media item on the content item.

A storage failure is reported as WriteError. Bytes that reached storage
before the failure are left in place.
"""

import io
import logging
import re
from pathlib import PurePosixPath
from typing import Optional

from xslt_derivative.exceptions import WriteError
from xslt_derivative.host.base import MediaService, StorageError
from xslt_derivative.models import ContentItem, MediaItem, Term

logger = logging.getLogger(__name__)

SCHEME_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*$')

DEFAULT_MIME_TYPE = 'application/octet-stream'

CONTENT_TYPES = {
    '.html': 'text/html',
    '.htm': 'text/html',
    '.xhtml': 'application/xhtml+xml',
    '.xml': 'application/xml',
    '.txt': 'text/plain',
    '.csv': 'text/csv',
    '.json': 'application/json',
    '.svg': 'image/svg+xml',
    '.rdf': 'application/rdf+xml',
    '.fo': 'application/xslfo+xml',
}


def build_storage_uri(scheme: str, path: str) -> str:
    """
    Join a scheme and a relative path as ``scheme://path``.

    Raises:
        WriteError: If the scheme is malformed or the path is empty
    """
    if not SCHEME_PATTERN.match(scheme or ''):
        raise WriteError(f"Invalid storage scheme: {scheme!r}")
    if not path or not path.strip():
        raise WriteError("Destination path is empty")
    return f"{scheme}://{path}"


def guess_mime_type(path: str, declared: Optional[str] = None) -> str:
    """Return ``declared`` if set, otherwise guess from the file extension."""
    if declared:
        return declared
    ext = PurePosixPath(path).suffix.lower()
    return CONTENT_TYPES.get(ext, DEFAULT_MIME_TYPE)


class DerivativeWriter:
    """Streams derivative bytes into storage through the media service."""

    def __init__(self, media: MediaService):
        self._media = media

    def write(self,
              content_item: ContentItem,
              media_type: str,
              dest_term: Term,
              data: bytes,
              mime_type: str,
              scheme: str,
              dest_path: str) -> MediaItem:
        """
        Store ``data`` at ``scheme://dest_path`` as a new media item.

        Args:
            content_item: Item the derivative belongs to
            media_type: Media bundle to create
            dest_term: Role term for the new media
            data: Transform output
            mime_type: MIME type of ``data``
            scheme: Destination storage scheme
            dest_path: Expanded destination path

        Returns:
            The media item holding the derivative

        Raises:
            WriteError: If the location is invalid or storage fails
        """
        uri = build_storage_uri(scheme, dest_path)
        logger.info(f"Writing derivative for node {content_item.nid} to {uri} ({mime_type})")

        with io.BytesIO(data) as stream:
            try:
                media = self._media.put_to_node(
                    content_item,
                    media_type,
                    dest_term,
                    stream,
                    mime_type,
                    uri,
                )
            except (StorageError, OSError) as e:
                logger.error(f"Failed to write derivative to {uri}: {e}")
                raise WriteError(f"Failed to write derivative to {uri}: {e}") from e

        logger.info(f"Derivative stored as media {media.mid}")
        return media
