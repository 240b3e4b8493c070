"""
Host Services
=============

Interfaces the hosting system implements, plus development backends.

Components:
- TermService, MediaService, FileStore, TokenService: abstract interfaces
- LocalFileStore: scheme-to-directory storage
- InMemoryTermService, InMemoryMediaService: dictionary-backed services
"""

from xslt_derivative.host.base import (
    FileStore,
    MediaService,
    StorageError,
    TermService,
    TokenService,
    split_uri,
)
from xslt_derivative.host.local import LocalFileStore
from xslt_derivative.host.memory import InMemoryMediaService, InMemoryTermService

__all__ = [
    "FileStore",
    "MediaService",
    "StorageError",
    "TermService",
    "TokenService",
    "split_uri",
    "LocalFileStore",
    "InMemoryMediaService",
    "InMemoryTermService",
]
