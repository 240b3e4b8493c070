"""
In-Memory Host Services
=======================

Dictionary-backed term and media services for development and tests.
Media bytes go through a real FileStore.
"""

import itertools
import logging
from typing import BinaryIO, Dict, Iterable, List, Optional

from xslt_derivative.host.base import FileStore, MediaService, TermService
from xslt_derivative.models import ContentItem, MediaItem, StoredFile, Term

logger = logging.getLogger(__name__)


class InMemoryTermService(TermService):
    """Term lookups over a fixed set of terms."""

    def __init__(self, terms: Iterable[Term] = ()):
        self._by_tid: Dict[int, Term] = {}
        for term in terms:
            self.add(term)

    def add(self, term: Term) -> Term:
        self._by_tid[term.tid] = term
        return term

    def get_term_for_uri(self, uri: str) -> Optional[Term]:
        if not uri:
            return None
        for term in self._by_tid.values():
            if term.uri == uri:
                return term
        return None

    def get_uri_for_term(self, term: Term) -> Optional[str]:
        known = self._by_tid.get(term.tid)
        if known is None or not known.uri:
            return None
        return known.uri

    def load_term(self, tid: int) -> Optional[Term]:
        return self._by_tid.get(tid)


class InMemoryMediaService(MediaService):
    """
    Media registry that stores derivative bytes through ``file_store``.

    Example:
        media = InMemoryMediaService(store, media_types=["document", "file"])
        media.add_media(node, source_file, term, bundle="file")
    """

    def __init__(self, file_store: FileStore, media_types: Iterable[str] = ()):
        self.file_store = file_store
        self.media_types = set(media_types)
        self._media: Dict[int, MediaItem] = {}
        self._ids = itertools.count(1)

    def has_media_type(self, media_type: str) -> bool:
        if not self.media_types:
            return super().has_media_type(media_type)
        return media_type in self.media_types

    def add_media(self,
                  content_item: ContentItem,
                  file: StoredFile,
                  term: Term,
                  bundle: str = "file",
                  name: str = "") -> MediaItem:
        """Attach an existing file to ``content_item`` under ``term``."""
        media = MediaItem(
            mid=next(self._ids),
            name=name or file.filename,
            bundle=bundle,
            nid=content_item.nid,
            file_id=file.fid,
            term_ids=(term.tid,),
        )
        self._media[media.mid] = media
        return media

    def media_for(self, content_item: ContentItem) -> List[MediaItem]:
        return [m for m in self._media.values() if m.nid == content_item.nid]

    def list_media_with_term(self, content_item: ContentItem, term: Term) -> List[MediaItem]:
        return [m for m in self.media_for(content_item) if term.tid in m.term_ids]

    def get_source_file(self, media: MediaItem) -> Optional[StoredFile]:
        return self.file_store.load(media.file_id)

    def put_to_node(self,
                    content_item: ContentItem,
                    media_type: str,
                    term: Term,
                    stream: BinaryIO,
                    mime_type: str,
                    uri: str) -> MediaItem:
        size = self.file_store.write(uri, stream)

        # Re-running an action replaces the file of an existing derivative.
        for existing in self.list_media_with_term(content_item, term):
            if existing.bundle == media_type:
                file = self.file_store.load(existing.file_id)
                if file is not None:
                    file.uri, file.filemime, file.size = uri, mime_type, size
                    file.filename = uri.rsplit('/', 1)[-1]
                    self.file_store.save(file)
                    logger.info(f"Updated media {existing.mid} with {uri}")
                    return existing

        file = StoredFile(fid=0, uri=uri, filemime=mime_type, size=size)
        file.set_permanent()
        self.file_store.save(file)
        media = self.add_media(content_item, file, term, bundle=media_type)
        logger.info(f"Created media {media.mid} for node {content_item.nid} at {uri}")
        return media
