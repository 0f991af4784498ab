# ============================================================================
# FILE: conftest.py
# RELPATH: indexed_file_analyzer/tests/conftest.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Pytest fixtures for the Indexed File Analyzer test suite
# ============================================================================

"""
Pytest configuration and shared fixtures.

Provides temporary directories and small indexed files built with the real
engine, so every test works against files on disk.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from typing import List, Optional
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from fileanalyzer.storage import IndexedFileBuilder

SAMPLE_HEADER = "Test Indexed File"


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def sample_records() -> List[bytes]:
    """Five records of mixed shape, including an empty one and one non-ASCII."""
    return [
        b'{"foo": 888888, "baz": "The burden of being the first"}',
        "Doc 1 Rules! ⚀".encode("utf-8"),
        b"",
        bytes(range(40)),
        b"Doc 4 Is in the sT0r3",
    ]


@pytest.fixture
def sample_metadata() -> bytes:
    return b'{"version": 3}'


@pytest.fixture
def double_encoded_records() -> List[bytes]:
    """Records that were accidentally UTF-8 encoded twice."""
    originals = [b"plain ascii", "café".encode("utf-8"), bytes([0, 0x7F, 0x80, 0xFF])]
    return [r.decode("latin-1").encode("utf-8") for r in originals]


# ============================================================================
# Filesystem Fixtures
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test file operations."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


def write_indexed_file(path: Path,
                       records: List[bytes],
                       metadata: Optional[bytes] = None,
                       header: str = SAMPLE_HEADER) -> Path:
    """Create an indexed file at ``path`` holding ``records`` and ``metadata``."""
    with IndexedFileBuilder(header).create(path) as indexed_file:
        for record in records:
            indexed_file.add(record)
        if metadata is not None:
            indexed_file.metadata = metadata
        indexed_file.commit()
    return path


@pytest.fixture
def make_indexed_file(temp_dir):
    """Factory fixture: make_indexed_file(records, metadata=None, name=..., header=...)."""
    def _make(records, metadata=None, name="sample.ixf", header=SAMPLE_HEADER):
        return write_indexed_file(temp_dir / name, records, metadata, header)
    return _make


@pytest.fixture
def sample_indexed_file(make_indexed_file, sample_records, sample_metadata):
    """An indexed file with the sample records and metadata."""
    return make_indexed_file(sample_records, sample_metadata)


# ============================================================================
# LIFECYCLE STATUS: Proposed
# USAGE: Import fixtures in test files, pytest auto-discovers them
# ============================================================================
