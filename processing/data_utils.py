#!/usr/bin/env python3
"""
data_utils.py - Source loading, pipeline wiring and export

Loads the two source texts, runs the three processing stages and writes
the joined table and correlations to disk.
"""

import json
from pathlib import Path
from typing import Mapping, Optional, Sequence, Tuple, Union

import pandas as pd
import requests
from loguru import logger

from .correlation import calculate_correlations, join_datasets
from .errors import IngestionError
from .models import CANDIDATES, JoinedRow, PipelineResult
from .trends import parse_trends
from .turnout import aggregate_turnout, parse_voter_records

DEFAULT_TIMEOUT = 30


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_source_text(source: Union[str, Path], timeout: float = DEFAULT_TIMEOUT) -> str:
    """Read a source from a local path or an http(s) URL.

    Raises:
        IngestionError: If the file is missing or the request fails
    """
    source_str = str(source)

    if is_url(source_str):
        logger.info(f"  🌐 Fetching {source_str}")
        try:
            response = requests.get(source_str, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise IngestionError(f"Failed to fetch source: {e}", source_str) from e
        response.encoding = response.encoding or "utf-8"
        return response.text

    path = Path(source_str)
    logger.info(f"  📄 Reading {path}")
    try:
        # utf-8-sig drops the BOM spreadsheet exports tend to carry
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise IngestionError(f"Failed to read source: {e}", source_str) from e


def load_sources(
    voter_source: Union[str, Path],
    trends_source: Union[str, Path],
    timeout: float = DEFAULT_TIMEOUT,
) -> Tuple[str, str]:
    """Load both source texts; either failing aborts the run."""
    logger.info("📥 Loading sources...")
    voter_text = load_source_text(voter_source, timeout=timeout)
    trends_text = load_source_text(trends_source, timeout=timeout)
    return voter_text, trends_text


def process_data(
    voter_text: str,
    trends_text: str,
    columns: Optional[Mapping[str, str]] = None,
) -> PipelineResult:
    """Run aggregation, trends parsing, join and correlation.

    Args:
        voter_text: Voter-roll CSV text
        trends_text: Search interest export text
        columns: Optional voter-roll header overrides with keys
            ``county``, ``registered`` and ``turned_out``

    Returns:
        PipelineResult with joined rows and correlations
    """
    columns = columns or {}
    column_args = {
        f"{key}_column": columns[key]
        for key in ("county", "registered", "turned_out")
        if columns.get(key)
    }

    turnout = aggregate_turnout(parse_voter_records(voter_text, **column_args))
    trends = parse_trends(trends_text)
    rows = join_datasets(turnout, trends)
    correlations = calculate_correlations(rows)

    if not rows:
        logger.warning("⚠️ No counties could be correlated")

    return PipelineResult(rows=rows, correlations=correlations)


def rows_to_frame(rows: Sequence[JoinedRow]) -> pd.DataFrame:
    """Joined rows as a DataFrame, one column per field."""
    columns = ["county", "county_code", "turnout_percentage", *CANDIDATES]
    return pd.DataFrame([row.to_dict() for row in rows], columns=columns)


def export_results(result: PipelineResult, output_dir: Union[str, Path]) -> Tuple[Path, Path]:
    """Write ``joined_counties.csv`` and ``correlations.json`` to output_dir."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    csv_path = output_dir / "joined_counties.csv"
    json_path = output_dir / "correlations.json"

    rows_to_frame(result.rows).to_csv(csv_path, index=False)
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(dict(result.correlations), f, indent=2)

    logger.success(f"💾 Saved {len(result.rows)} rows to {csv_path}")
    logger.success(f"💾 Saved correlations to {json_path}")
    return csv_path, json_path
