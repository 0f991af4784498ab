# ============================================================================
# SOURCEFILE: patcher.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/patcher.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: All-or-nothing copy of an indexed file with one UTF-8 layer stripped
# ============================================================================

"""
Patching.

Copies the selected records of an indexed file into a new indexed file,
stripping one layer of UTF-8 encoding from each.  Either the whole output is
committed, or no file is left at the output path.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from fileanalyzer.exceptions import TranscodeError
from fileanalyzer.logging import StructuredLogger
from fileanalyzer.models import SelectedRange
from fileanalyzer.storage import IndexedFile, IndexedFileBuilder
from fileanalyzer.transcode import destrip_utf8
from fileanalyzer.validators import ensure_output_absent

logger = logging.getLogger(__name__)


class Patcher:
    """Drives ``destrip_utf8`` over a record range into a fresh indexed file."""

    def __init__(self, session_log: Optional[StructuredLogger] = None):
        self.session_log = session_log

    def patch(self,
              source: IndexedFile,
              selected: SelectedRange,
              output: Union[str, Path]) -> int:
        """
        Write the destripped records of ``source`` to a new file at ``output``.

        The output gets the source's header and, when present, its metadata
        unchanged.

        Returns:
            Number of records written

        Raises:
            OutputExistsError: If ``output`` already exists
            TranscodeError: If a record cannot be destripped; ``record_index``
                names it and no file is left at ``output``
        """
        output = ensure_output_absent(output)
        target = IndexedFileBuilder(source.header).create(output)
        written = 0
        try:
            for index in selected:
                try:
                    record = destrip_utf8(source[index])
                except TranscodeError as e:
                    raise e.annotate(index) from e
                target.add(record)
                written += 1
                if self.session_log is not None:
                    self.session_log.log_record_processed(index, len(record), str(output))

            metadata = source.metadata
            if metadata is not None:
                target.metadata = metadata
            target.commit()
        except BaseException as e:
            logger.error("Patch of %s failed: %s", source.path, e)
            target.close()
            output.unlink(missing_ok=True)
            raise

        target.close()
        return written


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: storage.py, transcode.py, validators.py
# TESTS: tests/unit/test_patcher.py
# ============================================================================
