"""
Processing package for the turnout / search interest correlation pipeline

Parses the voter roll and the search interest export, joins them by county
and computes per-candidate correlations.
"""

__version__ = "0.1.0"

from .correlation import calculate_correlations, join_datasets, pearson_correlation
from .county_codes import COUNTY_CODES, normalize_county_name, resolve_county_code
from .data_utils import export_results, load_source_text, load_sources, process_data, rows_to_frame
from .errors import IngestionError
from .models import (
    CANDIDATES,
    CountyTurnout,
    JoinedRow,
    PipelineResult,
    TrendsRecord,
    VoterRecord,
)
from .trends import CANDIDATE_COLUMNS, parse_trends
from .turnout import aggregate_turnout, aggregate_turnout_text, parse_voter_records

__all__ = [
    "CANDIDATES",
    "CANDIDATE_COLUMNS",
    "COUNTY_CODES",
    "CountyTurnout",
    "IngestionError",
    "JoinedRow",
    "PipelineResult",
    "TrendsRecord",
    "VoterRecord",
    "aggregate_turnout",
    "aggregate_turnout_text",
    "calculate_correlations",
    "export_results",
    "join_datasets",
    "load_source_text",
    "load_sources",
    "normalize_county_name",
    "parse_trends",
    "parse_voter_records",
    "pearson_correlation",
    "process_data",
    "resolve_county_code",
    "rows_to_frame",
]
