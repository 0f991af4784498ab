# ============================================================================
# SOURCEFILE: renderer.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/renderer.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Formats records as count, size, hex and text lines
# ============================================================================

"""
Record rendering for ``dump``.

A record renders as, in order: a label line, a size line, then either hex
rows (optionally with an ASCII column) or the record decoded as UTF-8.
Which parts appear is governed by ``DisplayOptions``.
"""

from typing import List

from fileanalyzer.models import METADATA_INDEX, DisplayOptions

ROW_WIDTH = 16
GROUP_WIDTH = 8
MISSING_BYTE = "--"
NON_PRINTABLE = "."


def record_label(index: int) -> str:
    """Return "Metadata" for the metadata pseudo-record, else "Record=<index>"."""
    return "Metadata" if index == METADATA_INDEX else f"Record={index}"


def offset_width(total_size: int) -> int:
    """Number of hex digits used for row offsets of a record of ``total_size`` bytes."""
    if total_size > 0x10000000:
        return 16
    if total_size > 0x1000:
        return 8
    return 4


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte <= 0x7E else NON_PRINTABLE


class RecordRenderer:
    """Turns record bytes into the text lines of a dump."""

    def __init__(self, options: DisplayOptions):
        self.options = options

    def render(self, record: bytes, index: int) -> List[str]:
        """
        Render one record.

        Args:
            record: The record's bytes
            index: Its index, or METADATA_INDEX for the metadata

        Returns:
            The lines to emit, each already terminated by a line break,
            except decoded text which is emitted verbatim
        """
        lines: List[str] = []
        if self.options.counts:
            lines.append(record_label(index) + "\n")
        if self.options.sizes:
            lines.append(f"Size={len(record)}\n")
        if self.options.binary:
            lines.extend(self.binary_rows(record))
        elif self.options.text:
            lines.append(bytes(record).decode("utf-8", errors="replace"))
        return lines

    def binary_rows(self, record: bytes) -> List[str]:
        """Return one hex row per 16-byte chunk of ``record``."""
        width = offset_width(len(record))
        return [
            self.binary_row(start, width, record[start:start + ROW_WIDTH])
            for start in range(0, len(record), ROW_WIDTH)
        ]

    def binary_row(self, start: int, width: int, chunk: bytes) -> str:
        """
        Format up to 16 bytes as a hex row starting at offset ``start``.

        Example (text enabled)::

            0000: 48 65 6C 6C 6F -- -- --  -- -- -- -- -- -- -- --  Hello
        """
        cells = [f"{b:02X}" for b in chunk]
        cells += [MISSING_BYTE] * (ROW_WIDTH - len(chunk))
        row = (
            f"{start:0{width}X}: "
            + " ".join(cells[:GROUP_WIDTH])
            + "  "
            + " ".join(cells[GROUP_WIDTH:])
        )
        if self.options.text:
            chars = "".join(_printable(b) for b in chunk)
            if len(chars) > GROUP_WIDTH:
                chars = chars[:GROUP_WIDTH] + " " + chars[GROUP_WIDTH:]
            row += "  " + chars
        return row + "\n"


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: models.py
# TESTS: tests/unit/test_renderer.py
# ============================================================================
