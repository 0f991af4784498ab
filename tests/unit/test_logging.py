# ============================================================================
# SOURCEFILE: test_logging.py
# RELPATH: indexed_file_analyzer/tests/unit/test_logging.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Unit tests for StructuredLogger and UTF-8 console setup
# ============================================================================

"""
Unit tests for structured JSON logging.
"""

import builtins
import io
import json
import logging
import pytest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))

from fileanalyzer.logging import (
    LogEvent,
    StructuredLogger,
    configure_utf8_logging
)


def _file_entries(logger):
    lines = logger.log_file.read_text(encoding='utf-8').splitlines()
    return [json.loads(line) for line in lines]


class TestStructuredLoggerBasics:
    """Tests for basic StructuredLogger operations."""

    def test_create_logger_default(self, temp_dir):
        logger = StructuredLogger(log_dir=str(temp_dir))

        assert logger.log_dir == temp_dir
        assert logger.session_id is not None
        assert logger.log_file.exists()
        assert logger.log_file.name.startswith('analyzer_session_')
        assert logger.log_file.suffix == '.json'
        assert logger.session_id[:8] in logger.log_file.name

    def test_custom_session_id(self, temp_dir):
        logger = StructuredLogger(log_dir=str(temp_dir), session_id='test-session-123')
        assert logger.session_id == 'test-session-123'

    def test_log_directory_created(self, temp_dir):
        """Test log directory is created if missing."""
        log_path = temp_dir / 'nested' / 'logs'
        StructuredLogger(log_dir=str(log_path))
        assert log_path.is_dir()


class TestEvents:
    """Tests for each event writer."""

    def test_operation_start(self, temp_dir):
        logger = StructuredLogger(log_dir=str(temp_dir))
        logger.log_operation_start('dump', 'in.ixf', None)

        entry = _file_entries(logger)[0]
        assert entry['event'] == 'operation_start'
        assert entry['sessionId'] == logger.session_id
        assert entry['details'] == {'action': 'dump', 'source': 'in.ixf', 'destination': None}
        assert 'timestamp' in entry

    def test_operation_complete(self, temp_dir):
        logger = StructuredLogger(log_dir=str(temp_dir))
        logger.log_operation_complete('patch', 'in.ixf', 'out.ixf', 12, True, 34)

        details = _file_entries(logger)[0]['details']
        assert details['records'] == 12
        assert details['metadata'] is True
        assert details['elapsedMs'] == 34
        assert details['destination'] == 'out.ixf'

    def test_error_carries_record_index(self, temp_dir):
        logger = StructuredLogger(log_dir=str(temp_dir))
        logger.log_error('patch', 'in.ixf', 'In record 3, at position 13, invalid encoding (⚀)',
                         'TranscodeError', 3)

        entry = _file_entries(logger)[0]
        assert entry['event'] == LogEvent.ERROR.value
        assert entry['details']['recordIndex'] == 3
        assert entry['details']['errorType'] == 'TranscodeError'
        assert '⚀' in entry['details']['errorMessage']

    def test_record_processed(self, temp_dir):
        logger = StructuredLogger(log_dir=str(temp_dir))
        logger.log_record_processed(-1, 14, 'out/metadata')
        assert _file_entries(logger)[0]['details'] == {
            'recordIndex': -1, 'sizeBytes': 14, 'target': 'out/metadata'
        }

    def test_entries_are_newline_delimited(self, temp_dir):
        logger = StructuredLogger(log_dir=str(temp_dir))
        for i in range(3):
            logger.log_warning(f'warning {i}', {'i': i})
        entries = _file_entries(logger)
        assert [e['details']['context']['i'] for e in entries] == [0, 1, 2]
        assert all(e['event'] == LogEvent.WARNING.value for e in entries)


class TestLogBuffer:
    """Tests for the in-memory log buffer."""

    def test_buffer_matches_file(self, temp_dir):
        logger = StructuredLogger(log_dir=str(temp_dir))
        logger.log_operation_start('explode', 'a', 'b')
        logger.log_record_processed(0, 1)
        logger.log_operation_complete('explode', 'a', 'b', 1, False, 0)

        assert logger.log_buffer == _file_entries(logger)
        assert [e['event'] for e in logger.log_buffer] == [
            'operation_start', 'record_processed', 'operation_complete'
        ]

    def test_separate_loggers_have_separate_sessions(self, temp_dir):
        first = StructuredLogger(log_dir=str(temp_dir))
        second = StructuredLogger(log_dir=str(temp_dir))
        assert first.session_id != second.session_id
        assert first.log_file != second.log_file

    def test_log_write_failure_does_not_crash(self, temp_dir, monkeypatch, capsys):
        logger = StructuredLogger(log_dir=str(temp_dir))

        def bad_open(*a, **kw):
            raise OSError("disk full")
        monkeypatch.setattr(builtins, "open", bad_open, raising=True)

        logger.log_warning("x")
        monkeypatch.undo()

        assert logger.log_buffer
        assert "disk full" in capsys.readouterr().err


class TestUtf8Console:

    def test_wraps_non_utf8_stream(self, monkeypatch):
        raw = io.BytesIO()
        stream = io.TextIOWrapper(raw, encoding='cp1252')
        monkeypatch.setattr(sys, 'stdout', stream)

        configure_utf8_logging()
        print('Doc 1 Rules! ⚀', end='')
        sys.stdout.flush()

        assert raw.getvalue() == 'Doc 1 Rules! ⚀'.encode('utf-8')

    def test_force_installs_handler(self, monkeypatch):
        root = logging.getLogger()
        monkeypatch.setattr(root, 'handlers', [])
        configure_utf8_logging(force=True)
        assert len(root.handlers) == 1


# ============================================================================
# LIFECYCLE STATUS: Proposed
# COVERAGE: all LogEvent writers, buffer, write failure, UTF-8 console
# ============================================================================
