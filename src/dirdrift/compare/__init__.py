"""Cross-tree diff and duplicate detection."""

from .diff import diff_indexes
from .duplicates import find_duplicates
from .engine import SIDE_A, SIDE_B, ComparisonReport, TreeSummary, build_report, compare_trees

__all__ = [
    "SIDE_A",
    "SIDE_B",
    "ComparisonReport",
    "TreeSummary",
    "build_report",
    "compare_trees",
    "diff_indexes",
    "find_duplicates",
]
