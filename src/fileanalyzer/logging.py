# ============================================================================
# SOURCEFILE: logging.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/logging.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: UTF-8 console setup and structured JSON session logging
# ============================================================================

"""
Structured Logging Module.

Records each analyzer action (dump, explode, implode, patch) as JSON lines so
runs can be audited and inspected by tests.  Also makes sure the console can
print decoded record text regardless of the platform's default code page.
"""

from __future__ import annotations

import io
import json
import uuid
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Any
from enum import Enum
import sys


def _ensure_stream_utf8(stream: Optional[io.TextIOBase]) -> Optional[io.TextIOBase]:
    """Return a UTF-8 version of ``stream``, reconfiguring or wrapping it."""
    if stream is None:
        return None

    encoding = getattr(stream, "encoding", None)
    if isinstance(encoding, str) and encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
        return stream

    reconfigure = getattr(stream, "reconfigure", None)
    if callable(reconfigure):
        try:
            reconfigure(encoding="utf-8", errors="backslashreplace")
            return stream
        except (ValueError, io.UnsupportedOperation):
            pass

    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        return stream

    stream.flush()
    return io.TextIOWrapper(buffer, encoding="utf-8", errors="backslashreplace")


def configure_utf8_logging(force: bool = False) -> None:
    """Switch stdout, stderr and the root logger's handlers to UTF-8.

    Record text decoded with ``--text`` may contain any character, and a
    cp1252 console would otherwise raise while printing it.  With
    ``force=True`` a stderr handler is installed on the root logger when it
    has none.  Safe to call more than once.
    """
    for name in ("stdout", "stderr"):
        stream = getattr(sys, name, None)
        new_stream = _ensure_stream_utf8(stream)
        if new_stream is not None and new_stream is not stream:
            setattr(sys, name, new_stream)

    root = logging.getLogger()
    if force and not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)

    for handler in root.handlers:
        stream = getattr(handler, "stream", None)
        new_stream = _ensure_stream_utf8(stream)
        if new_stream is not None and new_stream is not stream:
            handler.setStream(new_stream)


class LogEvent(Enum):
    """Enumeration of loggable events."""
    OPERATION_START = "operation_start"
    OPERATION_COMPLETE = "operation_complete"
    ERROR = "error"
    WARNING = "warning"
    RECORD_PROCESSED = "record_processed"


class StructuredLogger:
    """
    JSON-structured session logger for analyzer actions.

    Each session writes one ``analyzer_session_<timestamp>_<id>.json`` file
    holding one JSON object per line, and keeps the same entries in memory.
    """

    def __init__(self, log_dir: str = "logs", session_id: Optional[str] = None):
        """
        Initialize structured logger.

        Args:
            log_dir: Directory for log files
            session_id: Optional session ID (generated if not provided)
        """
        self.log_dir = Path(log_dir)
        self.session_id = session_id or str(uuid.uuid4())
        self.start_time = datetime.now(timezone.utc)

        timestamp = self.start_time.strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"analyzer_session_{timestamp}_{self.session_id[:8]}.json"
        self.log_buffer: List[Dict] = []
        self._ensure_log_file_exists()

    def _ensure_log_file_exists(self) -> None:
        """Create the log directory and touch the session file; never raises."""
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.log_file.touch(exist_ok=True)
        except OSError as e:
            logging.getLogger(__name__).warning("Cannot create session log %s: %s", self.log_file, e)

    def log_operation_start(self,
                            action: str,
                            source: Optional[str],
                            destination: Optional[str]) -> None:
        """
        Log the start of an analyzer action.

        Args:
            action: "dump", "count", "explode", "implode" or "patch"
            source: Input container or directory
            destination: Output container or directory, if any
        """
        self._write_log_entry(self._create_log_entry(
            event=LogEvent.OPERATION_START,
            details={
                "action": action,
                "source": source,
                "destination": destination
            }
        ))

    def log_operation_complete(self,
                               action: str,
                               source: Optional[str],
                               destination: Optional[str],
                               records: int,
                               metadata: bool,
                               elapsed_ms: int) -> None:
        """
        Log successful completion of an analyzer action.

        Args:
            action: Action name
            source: Input container or directory
            destination: Output container or directory, if any
            records: Number of records visited
            metadata: Whether metadata was processed
            elapsed_ms: Duration in milliseconds
        """
        self._write_log_entry(self._create_log_entry(
            event=LogEvent.OPERATION_COMPLETE,
            details={
                "action": action,
                "source": source,
                "destination": destination,
                "records": records,
                "metadata": metadata,
                "elapsedMs": elapsed_ms
            }
        ))

    def log_error(self,
                  action: str,
                  source: Optional[str],
                  error_message: str,
                  error_type: str,
                  record_index: Optional[int] = None) -> None:
        """
        Log an error that ended an action.

        Args:
            action: Action name
            source: Input container or directory
            error_message: Human-readable error message
            error_type: Exception class name
            record_index: Record being processed when the error happened
        """
        self._write_log_entry(self._create_log_entry(
            event=LogEvent.ERROR,
            details={
                "action": action,
                "source": source,
                "errorMessage": error_message,
                "errorType": error_type,
                "recordIndex": record_index
            }
        ))

    def log_warning(self, message: str, context: Optional[Dict] = None) -> None:
        """Log a warning with optional context."""
        self._write_log_entry(self._create_log_entry(
            event=LogEvent.WARNING,
            details={
                "message": message,
                "context": context or {}
            }
        ))

    def log_record_processed(self,
                             record_index: int,
                             size_bytes: int,
                             target: Optional[str] = None) -> None:
        """
        Log one record written by explode, implode or patch.

        Args:
            record_index: Index of the record (-1 for metadata)
            size_bytes: Size of the record that was written
            target: File the record was written to, if any
        """
        self._write_log_entry(self._create_log_entry(
            event=LogEvent.RECORD_PROCESSED,
            details={
                "recordIndex": record_index,
                "sizeBytes": size_bytes,
                "target": target
            }
        ))

    def _create_log_entry(self, event: LogEvent, details: Dict[str, Any]) -> Dict:
        return {
            "sessionId": self.session_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event": event.value,
            "details": details
        }

    def _write_log_entry(self, entry: Dict) -> None:
        """Append the entry to the buffer and to the session file."""
        self.log_buffer.append(entry)

        try:
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(json.dumps(entry, ensure_ascii=False) + '\n')
        except OSError as e:
            # Session logging is best-effort
            print(f"Warning: Failed to write log entry: {e}", file=sys.stderr)


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: None (standalone logging)
# TESTS: tests/unit/test_logging.py
# ============================================================================
