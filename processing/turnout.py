"""
turnout.py - Voter roll aggregation

Parses the voter-roll CSV (one row per polling station) and rolls it up into
one CountyTurnout per county.

Usage:
    from processing.turnout import aggregate_turnout, parse_voter_records

    records = parse_voter_records(voter_text)
    turnout = aggregate_turnout(records)
    turnout["CJ"].turnout_percentage
"""

import io
from typing import Dict, Iterable, List

import numpy as np
import pandas as pd
from loguru import logger

from .errors import IngestionError
from .models import CountyTurnout, VoterRecord

DEFAULT_COUNTY_COLUMN = "Judet"
DEFAULT_REGISTERED_COLUMN = "Înscriși pe liste permanente"
DEFAULT_TURNED_OUT_COLUMN = "LP"


def clean_count(series: pd.Series) -> pd.Series:
    """Coerce a column to integer counts; empty or non-numeric cells count as 0."""
    return pd.to_numeric(series, errors="coerce").fillna(0).astype("int64")


def _skip_bad_line(fields: List[str]) -> None:
    logger.trace(f"Skipping malformed voter roll line: {fields}")
    return None


def parse_voter_records(
    text: str,
    county_column: str = DEFAULT_COUNTY_COLUMN,
    registered_column: str = DEFAULT_REGISTERED_COLUMN,
    turned_out_column: str = DEFAULT_TURNED_OUT_COLUMN,
) -> List[VoterRecord]:
    """Parse voter-roll CSV text into VoterRecords.

    Args:
        text: Raw CSV text with a header row
        county_column: Header of the county key column
        registered_column: Header of the registered-voters column
        turned_out_column: Header of the turned-out count column

    Returns:
        One VoterRecord per data row with a non-empty county

    Raises:
        IngestionError: If the text has no header or lacks a required column
    """
    logger.info("📊 Parsing voter roll...")

    # The header row is read as data so a longer first data row cannot be
    # taken for an implicit index; rows longer than the header are skipped.
    try:
        raw = pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=_skip_bad_line,
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise IngestionError(f"Voter roll could not be parsed: {e}") from e

    if raw.empty:
        raise IngestionError("Voter roll has no header row")

    df = raw.iloc[1:].reset_index(drop=True)
    df.columns = ["" if pd.isna(col) else str(col).strip() for col in raw.iloc[0]]
    required = [county_column, registered_column, turned_out_column]
    missing = [col for col in required if col not in df.columns]
    if missing:
        logger.debug(f"Available columns: {list(df.columns)}")
        raise IngestionError(f"Voter roll is missing required columns: {missing}")

    counties = df[county_column].fillna("").astype(str).str.strip()
    registered = clean_count(df[registered_column])
    turned_out = clean_count(df[turned_out_column])

    keep = counties != ""
    skipped = int((~keep).sum())
    if skipped:
        logger.debug(f"  Skipped {skipped} rows without a county")

    records = [
        VoterRecord(county=county, registered=int(reg), turned_out=int(out))
        for county, reg, out in zip(counties[keep], registered[keep], turned_out[keep])
    ]

    logger.info(f"  ✅ Loaded {len(records):,} voter roll rows")
    return records


def aggregate_turnout(records: Iterable[VoterRecord]) -> Dict[str, CountyTurnout]:
    """Group voter records by county and compute turnout percentage.

    A county with zero registered voters gets a 0.0 turnout percentage.
    """
    logger.info("🗳️ Aggregating turnout by county...")

    df = pd.DataFrame(
        [(r.county, r.registered, r.turned_out) for r in records],
        columns=["county", "registered", "turned_out"],
    )
    if df.empty:
        logger.warning("  ⚠️ No voter records to aggregate")
        return {}

    totals = df.groupby("county", sort=True)[["registered", "turned_out"]].sum()
    totals["turnout_percentage"] = np.where(
        totals["registered"] > 0,
        totals["turned_out"] * 100 / totals["registered"].where(totals["registered"] > 0, 1),
        0.0,
    )

    turnout = {
        str(county): CountyTurnout(
            county=str(county),
            total_registered=int(row.registered),
            total_turned_out=int(row.turned_out),
            turnout_percentage=float(row.turnout_percentage),
        )
        for county, row in totals.iterrows()
    }

    logger.info(f"  ✅ Aggregated turnout for {len(turnout)} counties")
    return turnout


def aggregate_turnout_text(text: str, **columns: str) -> Dict[str, CountyTurnout]:
    """Parse and aggregate voter-roll text in one step."""
    return aggregate_turnout(parse_voter_records(text, **columns))
