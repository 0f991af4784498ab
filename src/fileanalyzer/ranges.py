# ============================================================================
# SOURCEFILE: ranges.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/ranges.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Selection of the record index range to process
# ============================================================================

import sys
from typing import Optional

from fileanalyzer.models import RecordBounds, SelectedRange


def select_range(lower: Optional[int] = None,
                 upper: Optional[int] = None,
                 record_count: int = 0) -> SelectedRange:
    """
    Clamp optional bounds against the records actually present.

    ``lower`` defaults to 0 and never goes below it; ``upper`` defaults to
    the largest index and never goes past ``record_count - 1``.  The result
    may be empty, in which case nothing is processed.
    """
    low = max(0 if lower is None else lower, 0)
    high = min(sys.maxsize if upper is None else upper, record_count - 1)
    return SelectedRange(low, high)


def select_bounds(bounds: RecordBounds, record_count: int) -> SelectedRange:
    """Apply validated ``bounds`` (where -1 means unbounded) to ``record_count``."""
    return select_range(bounds.lower, bounds.effective_upper, record_count)


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: models.py
# TESTS: tests/unit/test_ranges.py
# ============================================================================
