# ============================================================================
# SOURCEFILE: analyzer.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/analyzer.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Carries out one dump, explode, implode or patch action
# ============================================================================

"""
Indexed File Analyzer.

``IndexedFileAnalyzer`` takes one action (see ``fileanalyzer.models``) and
carries it out against the input indexed file, writing dump output to a
caller-supplied text sink.  The input file is opened read-only with a builder
made from its own header, and is closed on every exit path.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, TextIO

from fileanalyzer.logging import StructuredLogger
from fileanalyzer.models import (
    METADATA_INDEX,
    Action,
    DumpAction,
    ExplodeAction,
    ImplodeAction,
    PatchAction
)
from fileanalyzer.patcher import Patcher
from fileanalyzer.ranges import select_bounds
from fileanalyzer.renderer import RecordRenderer
from fileanalyzer.storage import ArbitraryIndexedFileBuilder, IndexedFile
from fileanalyzer.writer import ContainerExploder, DirectoryImploder

logger = logging.getLogger(__name__)


def open_indexed_file(path) -> IndexedFile:
    """Open any indexed file for reading, whatever its header."""
    return ArbitraryIndexedFileBuilder(path).open(path, for_writing=False)


class IndexedFileAnalyzer:
    """
    Runs a single analyzer action.

    Attributes:
        action: The action to carry out
        session_log: Optional structured logger for the session
    """

    def __init__(self,
                 action: Action,
                 session_log: Optional[StructuredLogger] = None):
        self.action = action
        self.session_log = session_log

    @property
    def action_name(self) -> str:
        if isinstance(self.action, DumpAction) and self.action.options.count_only:
            return "count"
        return self.action.name

    def analyze(self, sink: TextIO) -> int:
        """
        Carry out the action.

        Args:
            sink: Text stream receiving dump output (unused by other actions)

        Returns:
            Number of records visited
        """
        source = str(getattr(self.action, "input_file", None) or self.action.directory)
        destination = self._destination()
        if self.session_log is not None:
            self.session_log.log_operation_start(self.action_name, source, destination)

        started = time.perf_counter()
        try:
            if isinstance(self.action, ImplodeAction):
                records = self._implode(self.action)
            elif isinstance(self.action, PatchAction):
                records = self._patch(self.action)
            elif isinstance(self.action, ExplodeAction):
                records = self._explode(self.action)
            elif isinstance(self.action, DumpAction):
                records = self._dump(self.action, sink)
            else:
                raise TypeError(f"Unsupported action: {self.action!r}")
        except Exception as e:
            if self.session_log is not None:
                self.session_log.log_error(
                    self.action_name,
                    source,
                    str(e),
                    type(e).__name__,
                    getattr(e, "record_index", None)
                )
            raise

        if self.session_log is not None:
            self.session_log.log_operation_complete(
                self.action_name,
                source,
                destination,
                records,
                self._metadata_requested(),
                int((time.perf_counter() - started) * 1000)
            )
        return records

    def _metadata_requested(self) -> bool:
        if isinstance(self.action, DumpAction):
            return self.action.options.metadata
        if isinstance(self.action, ExplodeAction):
            return self.action.metadata
        # Implode and patch always carry metadata across when present
        return True

    def _destination(self) -> Optional[str]:
        if isinstance(self.action, (ImplodeAction, PatchAction)):
            return str(self.action.output)
        if isinstance(self.action, ExplodeAction):
            return str(self.action.directory)
        return None

    def _dump(self, action: DumpAction, sink: TextIO) -> int:
        with open_indexed_file(action.input_file) as indexed_file:
            selected = select_bounds(action.bounds, indexed_file.record_count)
            if action.options.count_only:
                sink.write(f"{len(selected)}\n")
                return len(selected)

            renderer = RecordRenderer(action.options)
            for index in selected:
                sink.writelines(renderer.render(indexed_file[index], index))
            if action.options.metadata:
                metadata = indexed_file.metadata
                if metadata is not None:
                    sink.writelines(renderer.render(metadata, METADATA_INDEX))
            return len(selected)

    def _explode(self, action: ExplodeAction) -> int:
        with open_indexed_file(action.input_file) as indexed_file:
            selected = select_bounds(action.bounds, indexed_file.record_count)
            exploder = ContainerExploder(
                action.directory,
                text=action.text,
                session_log=self.session_log
            )
            written = exploder.explode(indexed_file, selected, action.metadata)
            logger.info("Exploded %d files into %s", len(written), action.directory)
            return len(selected)

    def _implode(self, action: ImplodeAction) -> int:
        plan = DirectoryImploder(self.session_log).implode(
            action.directory, action.header, action.output
        )
        return plan.record_count

    def _patch(self, action: PatchAction) -> int:
        with open_indexed_file(action.input_file) as indexed_file:
            selected = select_bounds(action.bounds, indexed_file.record_count)
            return Patcher(self.session_log).patch(indexed_file, selected, action.output)


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: all fileanalyzer modules
# TESTS: tests/unit/test_analyzer.py, tests/integration/test_cli.py
# ============================================================================
