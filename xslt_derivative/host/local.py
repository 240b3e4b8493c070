"""
Local Filesystem File Store
===========================

Development/fallback storage that maps each scheme to a directory on disk.

Configuration:
    XSLT_DERIVATIVE_STORAGE_PATH: Base directory (default: ./storage).
    Each scheme gets a subdirectory unless an explicit mapping is given.

Usage:
    store = LocalFileStore({"public": Path("/var/files"), "temporary": Path("/tmp")})
    record = store.create("temporary://upload/stylesheet.xsl", data)
    store.move(record, "public://finding_aid.xsl")
"""

import io
import itertools
import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Dict, Generator, List, Optional, Union

from xslt_derivative.host.base import FileStore, StorageError, split_uri
from xslt_derivative.models import StoredFile

logger = logging.getLogger(__name__)

DEFAULT_SCHEMES = ("public", "private", "temporary")


class LocalFileStore(FileStore):
    """Scheme-to-directory file store with an in-process record registry."""

    def __init__(self,
                 roots: Optional[Dict[str, Union[str, Path]]] = None,
                 base_path: Optional[Union[str, Path]] = None,
                 default_scheme: str = "public"):
        base = Path(base_path or os.environ.get("XSLT_DERIVATIVE_STORAGE_PATH", "./storage"))
        if roots is None:
            roots = {scheme: base / scheme for scheme in DEFAULT_SCHEMES}
        self._roots: Dict[str, Path] = {k: Path(v) for k, v in roots.items()}
        if default_scheme not in self._roots:
            raise StorageError(f"Default scheme not configured: {default_scheme}")
        self.default_scheme = default_scheme
        self._records: Dict[int, StoredFile] = {}
        self._ids = itertools.count(1)

    def schemes(self) -> List[str]:
        return list(self._roots)

    def _get_path(self, uri: str) -> Path:
        """Build filesystem path, refusing locations outside the scheme root."""
        scheme, path = split_uri(uri)
        if scheme not in self._roots:
            raise StorageError(f"Unknown storage scheme: {scheme}")
        root = self._roots[scheme].resolve()
        target = (root / path.lstrip('/')).resolve()
        if root != target and root not in target.parents:
            raise StorageError(f"Path escapes scheme root: {uri}")
        return target

    def realpath(self, uri: str) -> Optional[str]:
        return str(self._get_path(uri))

    def exists(self, uri: str) -> bool:
        return self._get_path(uri).is_file()

    @contextmanager
    def open(self, uri: str) -> Generator[BinaryIO, None, None]:
        file_path = self._get_path(uri)
        if not file_path.is_file():
            raise FileNotFoundError(f"No file stored at {uri}")
        with open(file_path, 'rb') as f:
            yield f

    def write(self, uri: str, stream: BinaryIO) -> int:
        file_path = self._get_path(uri)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'wb') as f:
                shutil.copyfileobj(stream, f)
        except OSError as e:
            raise StorageError(f"Failed to write {uri}: {e}") from e
        logger.info(f"Saved file to local storage: {file_path}")
        return file_path.stat().st_size

    def create(self, uri: str, data: bytes, filemime: str = "application/octet-stream") -> StoredFile:
        """Write bytes and register a new temporary file record."""
        size = self.write(uri, io.BytesIO(data))
        return self.save(StoredFile(fid=0, uri=uri, filemime=filemime, size=size))

    def load(self, fid: int) -> Optional[StoredFile]:
        return self._records.get(fid)

    def save(self, file: StoredFile) -> StoredFile:
        if not file.fid:
            file.fid = next(self._ids)
        self._records[file.fid] = file
        return file

    def move(self, file: StoredFile, destination_uri: str) -> StoredFile:
        source = self._get_path(file.uri)
        target = self._get_path(destination_uri)
        if not source.is_file():
            raise StorageError(f"Cannot move missing file: {file.uri}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(target))
        except OSError as e:
            raise StorageError(f"Failed to move {file.uri} to {destination_uri}: {e}") from e

        logger.info(f"Moved {file.uri} -> {destination_uri}")
        file.uri = destination_uri
        file.filename = target.name
        file.size = target.stat().st_size
        return file
