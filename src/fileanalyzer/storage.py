# ============================================================================
# SOURCEFILE: storage.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/storage.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Indexed file engine: open/create, record access, append, commit
# ============================================================================

"""
Indexed File Engine.

An indexed file holds a header string, an ordered list of byte-string records
and an optional metadata byte-string.  Layout after the NUL-terminated header:

    b"IXF1"                      magic
    u64 record count             big-endian
    u64 metadata length          0xFFFFFFFFFFFFFFFF when there is no metadata
    metadata bytes
    (u64 length, bytes) * count  the records, in index order

Appended records and new metadata stay in memory until ``commit()``, which
writes a complete new image next to the file and moves it into place.
"""

from __future__ import annotations

import logging
import os
import struct
import tempfile
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from fileanalyzer.exceptions import (
    ContainerFormatError,
    ContainerStateError,
    OutputExistsError,
    RecordIndexError
)
from fileanalyzer.header import HEADER_TERMINATOR, parse_header

logger = logging.getLogger(__name__)

MAGIC = b"IXF1"
_U64 = struct.Struct(">Q")
_NO_METADATA = 0xFFFFFFFFFFFFFFFF
_UNSET = object()

PathLike = Union[str, Path]


class IndexedFile:
    """
    An open indexed file.

    Use ``IndexedFileBuilder`` to obtain one.  Instances are context managers
    and must be closed on every exit path.
    """

    def __init__(self, path: Path, header: str, for_writing: bool):
        self.path = Path(path)
        self.header = header
        self.for_writing = for_writing
        self._handle: Optional[BinaryIO] = None
        self._offsets: List[int] = []
        self._lengths: List[int] = []
        self._committed_metadata: Optional[bytes] = None
        self._pending: List[bytes] = []
        self._pending_metadata = _UNSET
        self._open()

    # ---------------- reading ----------------

    def _open(self) -> None:
        self._handle = open(self.path, "rb")
        try:
            self._load_index()
        except BaseException:
            self._handle.close()
            self._handle = None
            raise

    def _read_exact(self, size: int, what: str) -> bytes:
        data = self._handle.read(size)
        if len(data) != size:
            raise ContainerFormatError(str(self.path), f"truncated {what}")
        return data

    def _read_u64(self, what: str) -> int:
        return _U64.unpack(self._read_exact(_U64.size, what))[0]

    def _load_index(self) -> None:
        self._handle.seek(len(self.header.encode("utf-8")) + len(HEADER_TERMINATOR))
        if self._read_exact(len(MAGIC), "magic") != MAGIC:
            raise ContainerFormatError(str(self.path), "bad magic after header")
        count = self._read_u64("record count")
        metadata_length = self._read_u64("metadata length")
        if metadata_length == _NO_METADATA:
            self._committed_metadata = None
        else:
            self._committed_metadata = self._read_exact(metadata_length, "metadata")

        offsets: List[int] = []
        lengths: List[int] = []
        for index in range(count):
            length = self._read_u64(f"length of record {index}")
            offsets.append(self._handle.tell())
            lengths.append(length)
            self._handle.seek(length, os.SEEK_CUR)
        if count and self._handle.tell() > os.fstat(self._handle.fileno()).st_size:
            raise ContainerFormatError(str(self.path), f"truncated record {count - 1}")
        self._offsets = offsets
        self._lengths = lengths
        logger.debug("Opened %s: %d records", self.path, count)

    def _check_open(self) -> None:
        if self._handle is None:
            raise ContainerStateError(str(self.path), "file is closed")

    def _check_writable(self) -> None:
        self._check_open()
        if not self.for_writing:
            raise ContainerStateError(str(self.path), "file is open for reading only")

    @property
    def record_count(self) -> int:
        self._check_open()
        return len(self._offsets) + len(self._pending)

    def __len__(self) -> int:
        return self.record_count

    def record(self, index: int) -> bytes:
        """Return the bytes of record ``index`` (0 <= index < record_count)."""
        count = self.record_count
        if not 0 <= index < count:
            raise RecordIndexError(index, count)
        committed = len(self._offsets)
        if index >= committed:
            return self._pending[index - committed]
        self._handle.seek(self._offsets[index])
        return self._read_exact(self._lengths[index], f"record {index}")

    def __getitem__(self, index: int) -> bytes:
        return self.record(index)

    @property
    def metadata(self) -> Optional[bytes]:
        self._check_open()
        if self._pending_metadata is not _UNSET:
            return self._pending_metadata
        return self._committed_metadata

    # ---------------- writing ----------------

    @metadata.setter
    def metadata(self, value: Optional[bytes]) -> None:
        self._check_writable()
        self._pending_metadata = None if value is None else bytes(value)

    def add(self, record: bytes) -> None:
        """Append a record; it becomes durable at the next ``commit()``."""
        self._check_writable()
        self._pending.append(bytes(record))

    def commit(self) -> None:
        """Write all records and metadata to disk, replacing the file atomically."""
        self._check_writable()
        if not self._pending and self._pending_metadata is _UNSET:
            return

        metadata = self.metadata
        fd, temp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "wb") as out:
                _write_prologue(out, self.header, self.record_count, metadata)
                for index in range(self.record_count):
                    data = self.record(index)
                    out.write(_U64.pack(len(data)))
                    out.write(data)
                out.flush()
                os.fsync(out.fileno())
            self._handle.close()
            self._handle = None
            os.replace(temp_name, self.path)
        except BaseException:
            if os.path.exists(temp_name):
                os.unlink(temp_name)
            raise
        finally:
            if self._handle is None:
                self._open()

        logger.debug("Committed %s: %d records", self.path, len(self._offsets))
        self._pending = []
        self._pending_metadata = _UNSET

    def close(self) -> None:
        """Release the file.  Uncommitted changes are discarded."""
        if self._handle is None:
            return
        if self._pending or self._pending_metadata is not _UNSET:
            logger.warning("Closing %s with uncommitted changes", self.path)
        self._handle.close()
        self._handle = None

    @property
    def closed(self) -> bool:
        return self._handle is None

    def __enter__(self) -> "IndexedFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"{self.record_count} records"
        return f"IndexedFile({str(self.path)!r}, header={self.header!r}, {state})"


def _write_prologue(out: BinaryIO, header: str, count: int, metadata: Optional[bytes]) -> None:
    out.write(header.encode("utf-8"))
    out.write(HEADER_TERMINATOR)
    out.write(MAGIC)
    out.write(_U64.pack(count))
    if metadata is None:
        out.write(_U64.pack(_NO_METADATA))
    else:
        out.write(_U64.pack(len(metadata)))
        out.write(metadata)


class IndexedFileBuilder:
    """
    Opens and creates indexed files carrying one specific header.

    Attributes:
        header: The header string every file of this kind starts with
    """

    def __init__(self, header: str):
        if HEADER_TERMINATOR.decode("ascii") in header:
            raise ValueError("header must not contain NUL characters")
        self.header = header

    def create(self, path: PathLike) -> IndexedFile:
        """
        Create a new, empty indexed file open for writing.

        Raises:
            OutputExistsError: If ``path`` already exists
        """
        path = Path(path)
        try:
            with open(path, "xb") as out:
                _write_prologue(out, self.header, 0, None)
        except FileExistsError:
            raise OutputExistsError(str(path))
        logger.debug("Created %s with header %r", path, self.header)
        return IndexedFile(path, self.header, for_writing=True)

    def open(self, path: PathLike, for_writing: bool = False) -> IndexedFile:
        """
        Open an existing indexed file.

        Raises:
            ContainerFormatError: If the file's header is not this builder's header
            MalformedHeaderError: If the file has no readable header
            FileNotFoundError: If ``path`` does not exist
        """
        path = Path(path)
        actual = parse_header(path)
        if actual != self.header:
            raise ContainerFormatError(
                str(path), f"header {actual!r} does not match expected {self.header!r}"
            )
        return IndexedFile(path, self.header, for_writing)

    def open_or_create(self, path: PathLike, for_writing: bool = False) -> IndexedFile:
        """Open ``path``, creating it first when missing and ``for_writing`` is set."""
        path = Path(path)
        if not path.exists() and for_writing:
            return self.create(path)
        return self.open(path, for_writing)


class ArbitraryIndexedFileBuilder(IndexedFileBuilder):
    """A builder for whatever kind of indexed file is found at ``path``."""

    def __init__(self, path: PathLike):
        super().__init__(parse_header(path))


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: exceptions.py, header.py
# TESTS: tests/unit/test_storage.py
# ============================================================================
