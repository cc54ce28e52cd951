"""
Analysis package: charts and narrative built on the processing results.
"""

from .dashboard import (
    CANDIDATE_TITLES,
    classify_correlation,
    describe_correlation,
    filter_rows,
    render_dashboard,
    summarize,
)

__all__ = [
    "CANDIDATE_TITLES",
    "classify_correlation",
    "describe_correlation",
    "filter_rows",
    "render_dashboard",
    "summarize",
]
