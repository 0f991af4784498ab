# ============================================================================
# SOURCEFILE: test_renderer.py
# RELPATH: indexed_file_analyzer/tests/unit/test_renderer.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Unit tests for record rendering
# ============================================================================

"""
Unit tests for RecordRenderer.

Covers label and size lines, hex rows with and without the ASCII column,
offset widths, and plain UTF-8 text output.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))

from fileanalyzer.renderer import RecordRenderer, offset_width, record_label
from fileanalyzer.models import DisplayOptions, METADATA_INDEX

TWENTY_BYTES = b"ABCDEFGHIJKLMNOPQRST"


class TestLabels:

    def test_record_label(self):
        assert record_label(7) == "Record=7"

    def test_metadata_label(self):
        assert record_label(METADATA_INDEX) == "Metadata"

    def test_counts_and_sizes(self):
        renderer = RecordRenderer(DisplayOptions(counts=True, sizes=True))
        assert renderer.render(b"abc", 2) == ["Record=2\n", "Size=3\n"]

    def test_metadata_pseudo_record(self):
        renderer = RecordRenderer(DisplayOptions(counts=True, sizes=True))
        assert renderer.render(b"{}", METADATA_INDEX) == ["Metadata\n", "Size=2\n"]

    def test_sizes_only(self):
        renderer = RecordRenderer(DisplayOptions(sizes=True))
        assert renderer.render(b"", 0) == ["Size=0\n"]


class TestBinaryRows:

    def test_twenty_bytes_make_two_rows(self):
        renderer = RecordRenderer(DisplayOptions(binary=True))
        assert renderer.render(TWENTY_BYTES, 0) == [
            "0000: 41 42 43 44 45 46 47 48  49 4A 4B 4C 4D 4E 4F 50\n",
            "0010: 51 52 53 54 -- -- -- --  -- -- -- -- -- -- -- --\n",
        ]

    def test_ascii_column_with_text(self):
        renderer = RecordRenderer(DisplayOptions(binary=True, text=True))
        rows = renderer.render(TWENTY_BYTES, 0)
        assert rows[0] == "0000: 41 42 43 44 45 46 47 48  49 4A 4B 4C 4D 4E 4F 50  ABCDEFGH IJKLMNOP\n"
        assert rows[1] == "0010: 51 52 53 54 -- -- -- --  -- -- -- -- -- -- -- --  QRST\n"

    def test_non_printable_bytes_become_dots(self):
        renderer = RecordRenderer(DisplayOptions(binary=True, text=True))
        row = renderer.render(bytes([0x00, 0x1F, 0x20, 0x7E, 0x7F, 0xFF]), 0)[0]
        assert row.endswith("  .. ~..\n")

    def test_exact_row_has_no_padding(self):
        renderer = RecordRenderer(DisplayOptions(binary=True))
        rows = renderer.render(bytes(16), 0)
        assert len(rows) == 1
        assert "--" not in rows[0]

    def test_empty_record_has_no_rows(self):
        renderer = RecordRenderer(DisplayOptions(counts=True, binary=True))
        assert renderer.render(b"", 3) == ["Record=3\n"]

    def test_labels_precede_rows(self):
        renderer = RecordRenderer(DisplayOptions(counts=True, sizes=True, binary=True))
        lines = renderer.render(b"\x01", 0)
        assert lines[:2] == ["Record=0\n", "Size=1\n"]
        assert lines[2].startswith("0000: 01 --")

    def test_large_record_uses_eight_digit_offsets(self):
        renderer = RecordRenderer(DisplayOptions(binary=True))
        rows = renderer.render(bytes(0x1001), 0)
        assert rows[0].startswith("00000000: ")
        assert rows[-1].startswith("00001000: 00 --")


class TestOffsetWidth:

    @pytest.mark.parametrize("size,width", [
        (0, 4),
        (0x1000, 4),
        (0x1001, 8),
        (0x10000000, 8),
        (0x10000001, 16),
    ])
    def test_width_thresholds(self, size, width):
        assert offset_width(size) == width


class TestText:

    def test_text_is_decoded_verbatim(self):
        renderer = RecordRenderer(DisplayOptions(text=True))
        assert renderer.render("Doc 1 Rules! ⚀\n".encode("utf-8"), 1) == ["Doc 1 Rules! ⚀\n"]

    def test_undecodable_bytes_are_replaced(self):
        renderer = RecordRenderer(DisplayOptions(text=True))
        assert renderer.render(b"a\xffb", 0) == ["a�b"]

    def test_counts_then_text(self):
        renderer = RecordRenderer(DisplayOptions(counts=True, text=True))
        assert renderer.render(b"hi", 4) == ["Record=4\n", "hi"]


# ============================================================================
# LIFECYCLE STATUS: Proposed
# COVERAGE: labels, hex rows, offset widths, text decoding
# ============================================================================
