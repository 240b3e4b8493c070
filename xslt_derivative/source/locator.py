"""
Source Locator
==============

Finds the media item carrying the source term on a content item, then
the file behind it. The two lookups fail with distinct messages.

When several media items carry the source term, candidates are ordered by
ascending media id and the first one wins. ``strict=True`` refuses to
choose instead.
"""

import logging
from typing import Tuple

from xslt_derivative.exceptions import AmbiguousSourceError, NotFoundError
from xslt_derivative.host.base import MediaService
from xslt_derivative.models import ContentItem, MediaItem, StoredFile, Term

logger = logging.getLogger(__name__)


class SourceLocator:
    """Resolves (media, file) for a content item and a source term."""

    def __init__(self, media: MediaService, strict: bool = False):
        self._media = media
        self.strict = strict

    def locate_media(self, content_item: ContentItem, source_term: Term) -> MediaItem:
        candidates = sorted(
            self._media.list_media_with_term(content_item, source_term),
            key=lambda m: m.mid,
        )
        if not candidates:
            raise NotFoundError(
                f"Could not locate source media for node {content_item.nid} "
                f"tagged with {source_term.uri or source_term.name}."
            )

        if len(candidates) > 1:
            mids = ", ".join(str(m.mid) for m in candidates)
            if self.strict:
                raise AmbiguousSourceError(
                    f"Node {content_item.nid} has {len(candidates)} source media ({mids})"
                )
            logger.warning(
                f"Node {content_item.nid} has {len(candidates)} source media ({mids}); "
                f"using media {candidates[0].mid}"
            )

        return candidates[0]

    def locate_file(self, media: MediaItem) -> StoredFile:
        file = self._media.get_source_file(media)
        if file is None:
            raise NotFoundError(f"Could not locate source media file for media {media.mid}.")
        return file

    def locate(self, content_item: ContentItem, source_term: Term) -> Tuple[MediaItem, StoredFile]:
        """
        Find the source media and its file.

        Raises:
            NotFoundError: "source media" when no media carries the term,
                "source media file" when the media has no file
            AmbiguousSourceError: In strict mode, when several media match
        """
        media = self.locate_media(content_item, source_term)
        file = self.locate_file(media)
        logger.info(f"Located source file {file.uri} (media {media.mid})")
        return media, file
