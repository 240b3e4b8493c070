"""
Domain Records
==============

Plain records for the entities the pipeline reads and writes. The host
system owns the real entities; these carry only what the pipeline needs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class FileStatus(str, Enum):
    """Lifecycle of a stored file."""
    TEMPORARY = "temporary"
    PERMANENT = "permanent"


@dataclass(frozen=True)
class Term:
    """Classification term, addressed portably by its URI."""

    tid: int
    name: str
    uri: str = ""
    vid: str = ""


@dataclass(frozen=True)
class ContentItem:
    """The entity an action executes against."""

    nid: int
    title: str = ""
    uuid: str = ""
    type: str = ""


@dataclass
class StoredFile:
    """
    A byte sequence addressed by ``scheme://path``.

    Attributes:
        fid: Host file id
        uri: Storage location (e.g. "public://finding_aid.xsl")
        filename: Base name of the file
        filemime: MIME type recorded for the file
        size: Size in bytes (0 if unknown)
        status: Temporary after upload, permanent once committed
    """
    fid: int
    uri: str
    filename: str = ""
    filemime: str = "application/octet-stream"
    size: int = 0
    status: FileStatus = FileStatus.TEMPORARY

    def __post_init__(self):
        if not self.filename:
            self.filename = self.uri.rsplit('/', 1)[-1]

    @property
    def scheme(self) -> str:
        return self.uri.split('://', 1)[0] if '://' in self.uri else ""

    @property
    def is_permanent(self) -> bool:
        return self.status == FileStatus.PERMANENT

    def set_permanent(self) -> None:
        self.status = FileStatus.PERMANENT


@dataclass
class MediaItem:
    """Links a content item to one stored file, tagged with a role term."""

    mid: int
    name: str
    bundle: str
    nid: int
    file_id: int
    term_ids: Tuple[int, ...] = ()


@dataclass(frozen=True)
class TransformContext:
    """
    Token data for a single execution.

    The timestamp is captured once so that repeated expansion of the same
    template yields the same path.
    """
    node: ContentItem
    media: Optional[MediaItem] = None
    term: Optional[Term] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def as_token_data(self) -> dict:
        return {
            'node': self.node,
            'media': self.media,
            'term': self.term,
            'date': self.timestamp,
        }
