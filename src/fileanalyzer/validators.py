# ============================================================================
# FILE: validators.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/validators.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Shape checks for implode directories and output paths
# ============================================================================

"""
Validators Module.

Checks that run before anything is written: the shape of an implode
directory listing, and that an output container does not already exist.
The listing check works on names only, so it needs no filesystem.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Union

from fileanalyzer.exceptions import ImplodeValidationError, OutputExistsError
from fileanalyzer.models import DirectoryEntry, ImplodePlan

UNEXPECTED_ENTRY_HINT = (
    "Implode directory entries must be numeric, or numeric+'.txt', and "
    "contiguous, starting at 0. Zero or one of 'metadata' or 'metadata.txt' "
    "is also supported."
)


def plan_implode(names: Iterable[str]) -> ImplodePlan:
    """
    Order a directory listing into records plus optional metadata.

    Args:
        names: File names found in the implode directory

    Returns:
        ImplodePlan with record file names in record order

    Raises:
        ImplodeValidationError: If both metadata files are present, a name is
            neither numeric nor metadata, two names share an index, or an
            index is missing
    """
    remaining = list(names)

    metadata: Optional[str] = None
    if "metadata" in remaining:
        remaining.remove("metadata")
        if "metadata.txt" in remaining:
            raise ImplodeValidationError(
                "Directory must not contain both 'metadata' and 'metadata.txt'.",
                "metadata.txt"
            )
        metadata = "metadata"
    elif "metadata.txt" in remaining:
        remaining.remove("metadata.txt")
        metadata = "metadata.txt"

    entries: List[DirectoryEntry] = []
    for name in remaining:
        entry = DirectoryEntry.parse(name)
        if entry is None or entry.is_metadata:
            raise ImplodeValidationError(f"Unexpected file '{name}'. {UNEXPECTED_ENTRY_HINT}", name)
        entries.append(entry)

    entries.sort(key=lambda e: (e.ordinal, e.name.lower()))

    for position, entry in enumerate(entries):
        if entry.ordinal == position:
            continue
        if entry.ordinal == position - 1:
            previous = entries[position - 1].name
            raise ImplodeValidationError(
                f"Directory must not contain both '{previous}' and '{entry.name}'",
                entry.name
            )
        raise ImplodeValidationError(
            f"Cannot find file '{position}' or '{position}.txt'.",
            str(position)
        )

    return ImplodePlan(tuple(e.name for e in entries), metadata)


def ensure_output_absent(path: Union[str, Path]) -> Path:
    """
    Refuse to write an output container over an existing file.

    Raises:
        OutputExistsError: If anything exists at ``path``
    """
    path = Path(path)
    if path.exists():
        raise OutputExistsError(str(path))
    return path


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: exceptions.py, models.py
# TESTS: tests/unit/test_validators.py
# ============================================================================
