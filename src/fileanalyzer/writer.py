# ============================================================================
# SOURCEFILE: writer.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/writer.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION:
#   Handles file I/O for exploding an indexed file into a directory
#   (ContainerExploder) and imploding a directory into a new indexed file
#   (DirectoryImploder).
# ============================================================================

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from fileanalyzer.exceptions import ImplodeValidationError
from fileanalyzer.logging import StructuredLogger
from fileanalyzer.models import ImplodePlan, SelectedRange, METADATA_INDEX
from fileanalyzer.storage import IndexedFile, IndexedFileBuilder
from fileanalyzer.validators import ensure_output_absent, plan_implode

logger = logging.getLogger(__name__)

METADATA_STEM = "metadata"
TEXT_SUFFIX = ".txt"


class ContainerExploder:
    """Writes records of an indexed file to one file each."""

    def __init__(self,
                 output_dir: Union[str, Path],
                 text: bool = False,
                 session_log: Optional[StructuredLogger] = None):
        """
        Initialize ContainerExploder.

        Args:
            output_dir: Directory to write files into (created if missing).
            text: If True, file names get TEXT_SUFFIX appended, the suffix
                implode accepts.
            session_log: Optional structured logger for per-record events.
        """
        self.output_dir = Path(output_dir)
        self.suffix = TEXT_SUFFIX if text else ""
        self.session_log = session_log
        self.files_written: List[Path] = []

    def target_for(self, index: int) -> Path:
        """Return the file a record (or METADATA_INDEX) is written to."""
        stem = METADATA_STEM if index == METADATA_INDEX else str(index)
        return self.output_dir / f"{stem}{self.suffix}"

    def explode(self,
                indexed_file: IndexedFile,
                selected: SelectedRange,
                include_metadata: bool = False) -> List[Path]:
        """
        Write each selected record, then the metadata if asked for and present.

        Existing files with the same names are overwritten.

        Returns:
            The paths written, in write order
        """
        self.files_written = []
        self.output_dir.mkdir(parents=True, exist_ok=True)

        for index in selected:
            self._write(index, indexed_file[index])

        if include_metadata:
            metadata = indexed_file.metadata
            if metadata is not None:
                self._write(METADATA_INDEX, metadata)
            else:
                logger.info("No metadata in %s; nothing written for it", indexed_file.path)
                if self.session_log is not None:
                    self.session_log.log_warning(
                        "Metadata requested but not present",
                        {"source": str(indexed_file.path)}
                    )

        return list(self.files_written)

    def _write(self, index: int, data: bytes) -> None:
        target = self.target_for(index)
        target.write_bytes(data)
        self.files_written.append(target)
        if self.session_log is not None:
            self.session_log.log_record_processed(index, len(data), str(target))


class DirectoryImploder:
    """Builds a new indexed file from a directory of numbered record files."""

    def __init__(self, session_log: Optional[StructuredLogger] = None):
        self.session_log = session_log

    def plan(self, directory: Union[str, Path]) -> ImplodePlan:
        """
        Validate ``directory`` and return the record order.

        Raises:
            ImplodeValidationError: If the directory does not have implode shape
            OSError: If the directory cannot be listed
        """
        directory = Path(directory)
        names = os.listdir(directory)
        plan = plan_implode(names)
        for name in plan.records + ((plan.metadata,) if plan.metadata else ()):
            if not (directory / name).is_file():
                raise ImplodeValidationError(f"Entry '{name}' is not a regular file.", name)
        return plan

    def implode(self,
                directory: Union[str, Path],
                header: str,
                output: Union[str, Path]) -> ImplodePlan:
        """
        Create ``output`` with ``header`` holding the directory's records.

        All validation happens before ``output`` is created.  If writing fails
        afterwards the partial output is removed.

        Raises:
            OutputExistsError: If ``output`` already exists
            ImplodeValidationError: If the directory does not have implode shape
        """
        directory = Path(directory)
        output = ensure_output_absent(output)
        plan = self.plan(directory)

        indexed_file = IndexedFileBuilder(header).create(output)
        try:
            with indexed_file:
                for index, name in enumerate(plan.records):
                    data = (directory / name).read_bytes()
                    indexed_file.add(data)
                    if self.session_log is not None:
                        self.session_log.log_record_processed(index, len(data), str(output))
                if plan.metadata is not None:
                    indexed_file.metadata = (directory / plan.metadata).read_bytes()
                indexed_file.commit()
        except BaseException:
            logger.warning("Implode into %s failed; removing partial output", output)
            output.unlink(missing_ok=True)
            raise

        logger.debug("Imploded %d records from %s into %s", plan.record_count, directory, output)
        return plan


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: storage.py, validators.py, models.py, logging.py
# TESTS: tests/unit/test_writer.py
# ============================================================================
