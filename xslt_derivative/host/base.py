"""
Host Service Interfaces
=======================

Abstract base classes for the services the hosting system provides.
The pipeline receives implementations through constructors; any host
(a CMS, a repository platform, a test harness) can plug in by
implementing these methods.
"""

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, ContextManager, Dict, List, Optional

from xslt_derivative.models import ContentItem, MediaItem, StoredFile, Term


class StorageError(RuntimeError):
    """Raised by file stores when a storage operation fails."""
    pass


def split_uri(uri: str) -> tuple:
    """
    Split a ``scheme://path`` location into its parts.

    Raises:
        StorageError: If the uri has no scheme separator
    """
    if '://' not in uri:
        raise StorageError(f"Not a scheme://path location: {uri}")
    scheme, path = uri.split('://', 1)
    return scheme, path


class TermService(ABC):
    """Taxonomy lookups. Read-only and deterministic."""

    @abstractmethod
    def get_term_for_uri(self, uri: str) -> Optional[Term]:
        """Return the live term carrying ``uri`` or None."""
        pass

    @abstractmethod
    def get_uri_for_term(self, term: Term) -> Optional[str]:
        """Return the portable URI of ``term`` or None."""
        pass

    @abstractmethod
    def load_term(self, tid: int) -> Optional[Term]:
        """Load a term by host-internal id."""
        pass


class MediaService(ABC):
    """Media lookups and the derivative attach operation."""

    @abstractmethod
    def list_media_with_term(self, content_item: ContentItem, term: Term) -> List[MediaItem]:
        """Return every media item of ``content_item`` tagged with ``term``."""
        pass

    @abstractmethod
    def get_source_file(self, media: MediaItem) -> Optional[StoredFile]:
        """Return the file behind the media's source-file relation."""
        pass

    @abstractmethod
    def put_to_node(self,
                    content_item: ContentItem,
                    media_type: str,
                    term: Term,
                    stream: BinaryIO,
                    mime_type: str,
                    uri: str) -> MediaItem:
        """
        Store ``stream`` at ``uri`` and attach it to ``content_item``.

        Args:
            content_item: Owner of the new media
            media_type: Media bundle to create
            term: Role term to tag the media with
            stream: Readable binary stream positioned at the start
            mime_type: MIME type of the stored bytes
            uri: Destination ``scheme://path``

        Returns:
            The created (or updated) media item
        """
        pass

    def has_media_type(self, media_type: str) -> bool:
        """Check that a media bundle exists (default: accept anything)."""
        return bool(media_type)


class FileStore(ABC):
    """
    Scheme-addressed file storage with a file record registry.

    All locations use the ``scheme://path`` convention.
    """

    default_scheme: str = "public"

    @abstractmethod
    def schemes(self) -> List[str]:
        """Return the storage schemes this store can address."""
        pass

    @abstractmethod
    def load(self, fid: int) -> Optional[StoredFile]:
        """Load a file record by id."""
        pass

    @abstractmethod
    def save(self, file: StoredFile) -> StoredFile:
        """Persist a file record."""
        pass

    @abstractmethod
    def move(self, file: StoredFile, destination_uri: str) -> StoredFile:
        """Relocate a file's bytes and update its record."""
        pass

    @abstractmethod
    def exists(self, uri: str) -> bool:
        """Check if bytes exist at ``uri``."""
        pass

    @abstractmethod
    def write(self, uri: str, stream: BinaryIO) -> int:
        """Write a stream to ``uri``. Returns the number of bytes written."""
        pass

    @abstractmethod
    def open(self, uri: str) -> ContextManager[BinaryIO]:
        """
        Context manager yielding a readable binary stream for ``uri``.

        The stream is released on every exit path.

        Raises:
            FileNotFoundError: If nothing is stored at ``uri``
        """
        pass

    def read(self, uri: str) -> bytes:
        """Read all bytes stored at ``uri``."""
        with self.open(uri) as stream:
            return stream.read()

    def realpath(self, uri: str) -> Optional[str]:
        """Return a local filesystem path for ``uri`` if the store has one."""
        return None


class TokenService(ABC):
    """Placeholder replacement for path templates."""

    @abstractmethod
    def replace(self, template: str, data: Dict[str, Any]) -> str:
        """Replace every ``[namespace:property]`` token in ``template``."""
        pass
