# ============================================================================
# SOURCEFILE: transcode.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/transcode.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Strips one layer of accidental UTF-8 double-encoding
# ============================================================================

"""
UTF-8 destripping.

A record that was encoded to UTF-8 twice holds, after one decode, only
characters in U+0000..U+00FF, each standing for one byte of the real record.
``destrip_utf8`` undoes that layer and reports the exact input byte offset
of anything that does not fit.
"""

from fileanalyzer.exceptions import TranscodeError

_MAX_BYTE_CHAR = 0xFF


def destrip_utf8(data: bytes) -> bytes:
    """
    Decode ``data`` as UTF-8 and re-encode each character as a single byte.

    Raises:
        TranscodeError: If ``data`` is not valid UTF-8 (offset of the first
            bad byte) or decodes to a character above U+00FF (offset of that
            character's first byte)
    """
    try:
        text = bytes(data).decode("utf-8", errors="strict")
    except UnicodeDecodeError as e:
        raise TranscodeError(e.start, e.reason) from e

    for position, char in enumerate(text):
        if ord(char) > _MAX_BYTE_CHAR:
            offset = len(text[:position].encode("utf-8"))
            raise TranscodeError(offset, f"invalid encoding ({char})")

    return text.encode("latin-1")
