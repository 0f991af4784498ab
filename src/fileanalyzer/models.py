# ============================================================================
# SOURCEFILE: models.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/models.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Display options, record ranges, actions and directory entries
# ============================================================================

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Iterator, Optional, Tuple, Union

from fileanalyzer.exceptions import ConfigValidationError

# Record index used to address the metadata pseudo-record.
METADATA_INDEX = -1

RECORD_FILE_PATTERN = re.compile(r"(\d+)(\.txt)?", re.ASCII | re.IGNORECASE)
METADATA_FILE_NAMES = ("metadata", "metadata.txt")


@dataclass(frozen=True)
class DisplayOptions:
    """
    What to show for each record of a dump.

    Attributes:
        counts: Show "Record=<n>" before each record, or only the total count
        sizes: Show "Size=<n>" before each record
        binary: Show record contents as hex rows
        text: Decode records as UTF-8, or add an ASCII column to hex rows
        metadata: Also render the metadata pseudo-record, after the records
    """
    counts: bool = False
    sizes: bool = False
    binary: bool = False
    text: bool = False
    metadata: bool = False

    @property
    def count_only(self) -> bool:
        """True when the whole dump is just the number of selected records."""
        return self.counts and not (self.sizes or self.binary or self.text)

    @property
    def any_selected(self) -> bool:
        return self.counts or self.sizes or self.binary or self.text


@dataclass(frozen=True)
class RecordBounds:
    """
    Optional zero-based bounds on the records to process.

    ``upper`` of -1 means "no upper bound", the same as leaving it unset.
    """
    lower: Optional[int] = None
    upper: Optional[int] = None

    def __post_init__(self) -> None:
        if self.lower is not None and self.lower < 0:
            raise ConfigValidationError("lower", self.lower, "Must be >= 0")
        if self.upper is not None and self.upper < -1:
            raise ConfigValidationError("upper", self.upper, "Must be >= -1")

    @property
    def effective_upper(self) -> Optional[int]:
        if self.upper is None or self.upper == -1:
            return None
        return self.upper


@dataclass(frozen=True)
class SelectedRange:
    """Inclusive range [low, high] of record indices; empty when low > high."""
    low: int
    high: int

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.low, self.high + 1))

    def __len__(self) -> int:
        return max(0, self.high - self.low + 1)


# ============================================================================
# Actions: exactly one is carried out per invocation
# ============================================================================

@dataclass(frozen=True)
class DumpAction:
    """Print records (or just their count) of ``input_file``."""
    name: ClassVar[str] = "dump"

    input_file: Path
    options: DisplayOptions
    bounds: RecordBounds = field(default_factory=RecordBounds)


@dataclass(frozen=True)
class ExplodeAction:
    """Write each selected record of ``input_file`` to its own file in ``directory``."""
    name: ClassVar[str] = "explode"

    input_file: Path
    directory: Path
    text: bool = False
    metadata: bool = False
    bounds: RecordBounds = field(default_factory=RecordBounds)


@dataclass(frozen=True)
class ImplodeAction:
    """Build a new indexed file at ``output`` from the numbered files in ``directory``."""
    name: ClassVar[str] = "implode"

    directory: Path
    header: str
    output: Path

    def __post_init__(self) -> None:
        if "\x00" in self.header:
            raise ConfigValidationError("header", self.header, "Must not contain NUL characters")


@dataclass(frozen=True)
class PatchAction:
    """Copy ``input_file`` to ``output`` with one UTF-8 layer stripped from every record."""
    name: ClassVar[str] = "patch"

    input_file: Path
    output: Path
    bounds: RecordBounds = field(default_factory=RecordBounds)


Action = Union[DumpAction, ExplodeAction, ImplodeAction, PatchAction]


# ============================================================================
# Implode directory entries
# ============================================================================

@dataclass(frozen=True)
class DirectoryEntry:
    """
    A file name accepted in an implode directory.

    Attributes:
        name: The file name as listed
        ordinal: Record index for numeric entries, None for metadata
    """
    name: str
    ordinal: Optional[int] = None

    @property
    def is_metadata(self) -> bool:
        return self.ordinal is None

    @classmethod
    def parse(cls, name: str) -> Optional["DirectoryEntry"]:
        """Classify ``name``; None when it is not an acceptable entry."""
        if name in METADATA_FILE_NAMES:
            return cls(name)
        match = RECORD_FILE_PATTERN.fullmatch(name)
        if match is None:
            return None
        return cls(name, int(match.group(1)))


@dataclass(frozen=True)
class ImplodePlan:
    """Record file names in record order, plus the optional metadata file name."""
    records: Tuple[str, ...]
    metadata: Optional[str] = None

    @property
    def record_count(self) -> int:
        return len(self.records)


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: exceptions.py
# TESTS: tests/unit/test_models.py
# ============================================================================
