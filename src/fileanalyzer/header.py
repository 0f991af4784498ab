# ============================================================================
# SOURCEFILE: header.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/header.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Reads the NUL-terminated header string of an indexed file
# ============================================================================

"""
Header sniffing.

An indexed file starts with its header string encoded as UTF-8 and ended by a
NUL byte.  Reading it first lets the caller build a builder for exactly that
kind of file before opening it.
"""

from pathlib import Path
from typing import Union

from fileanalyzer.exceptions import MalformedHeaderError

HEADER_TERMINATOR = b"\x00"
_CHUNK_SIZE = 256


def parse_header(path: Union[str, Path]) -> str:
    """
    Extract the header string from the indexed file at ``path``.

    Only the bytes up to the terminating NUL are read.  A NUL byte never
    occurs inside a multi-byte UTF-8 sequence, so the raw prefix can be cut at
    the first NUL before decoding.

    Raises:
        MalformedHeaderError: If no NUL is found or the prefix is not UTF-8
        OSError: If the file cannot be opened
    """
    prefix = bytearray()
    with open(path, "rb") as f:
        while True:
            chunk = f.read(_CHUNK_SIZE)
            if not chunk:
                raise MalformedHeaderError(str(path), "end of file before header terminator")
            end = chunk.find(HEADER_TERMINATOR)
            if end >= 0:
                prefix += chunk[:end]
                break
            prefix += chunk

    try:
        return prefix.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedHeaderError(str(path), f"header is not UTF-8 at byte {e.start}") from e


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: exceptions.py
# TESTS: tests/unit/test_header.py
# ============================================================================
