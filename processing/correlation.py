"""
correlation.py - County join and Pearson correlation

Joins trends records to county turnout through the county code table and
computes, per candidate, the Pearson correlation between turnout percentage
and search interest.

Missing candidate values: a row whose value for a candidate is None is left
out of that candidate's pair of series only. The other candidates still use
the row.
"""

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from .county_codes import resolve_county_code, resolve_county_key
from .models import CANDIDATES, CountyTurnout, JoinedRow, TrendsRecord


def index_turnout_by_code(turnout: Mapping[str, CountyTurnout]) -> Dict[str, CountyTurnout]:
    """Re-key county turnout by county code.

    Keys that are already codes are kept, display names are mapped through
    the county table, anything else is dropped.
    """
    by_code: Dict[str, CountyTurnout] = {}
    for key, stats in turnout.items():
        code = resolve_county_key(key)
        if code is None:
            logger.debug(f"Unrecognized voter roll county: {key!r}")
            continue
        by_code[code] = stats
    return by_code


def join_datasets(
    turnout: Mapping[str, CountyTurnout], trends: Iterable[TrendsRecord]
) -> Tuple[JoinedRow, ...]:
    """Combine trends records with county turnout, keeping trends order.

    Only counties resolving to the same code on both sides produce a row.
    """
    logger.info("🔗 Joining search interest with turnout...")

    by_code = index_turnout_by_code(turnout)
    rows = []
    unmatched = []
    for record in trends:
        code = resolve_county_code(record.county)
        stats = by_code.get(code) if code else None
        if stats is None:
            unmatched.append(record.county)
            continue

        rows.append(
            JoinedRow(
                county=record.county,
                county_code=code,
                turnout_percentage=stats.turnout_percentage,
                **{candidate: record.interest(candidate) for candidate in CANDIDATES},
            )
        )

    if unmatched:
        logger.debug(f"Dropped {len(unmatched)} unmatched regions: {unmatched}")
    logger.info(f"  ✅ Joined {len(rows)} counties")
    return tuple(rows)


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson product-moment correlation of two equally long series.

    Returns 0.0 for empty series, mismatched lengths, or a series with no
    variance.
    """
    n = len(x)
    if n == 0 or n != len(y):
        return 0.0

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    if np.all(xs == xs[0]) or np.all(ys == ys[0]):
        return 0.0

    sum_x = xs.sum()
    sum_y = ys.sum()
    sum_xy = (xs * ys).sum()
    sum_x2 = (xs * xs).sum()
    sum_y2 = (ys * ys).sum()

    numerator = n * sum_xy - sum_x * sum_y
    denominator = np.sqrt((n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y))
    if denominator == 0 or not np.isfinite(denominator):
        return 0.0

    return float(np.clip(numerator / denominator, -1.0, 1.0))


def candidate_series(rows: Iterable[JoinedRow], candidate: str) -> Tuple[list, list]:
    """Paired (turnout, interest) series for rows that have a value for candidate."""
    turnout_values = []
    interest_values = []
    for row in rows:
        value: Optional[float] = row.interest(candidate)
        if value is None:
            continue
        turnout_values.append(row.turnout_percentage)
        interest_values.append(value)
    return turnout_values, interest_values


def calculate_correlations(rows: Sequence[JoinedRow]) -> Mapping[str, float]:
    """Correlation between turnout and each candidate's search interest."""
    logger.info("📐 Calculating correlations...")

    correlations = {}
    for candidate in CANDIDATES:
        turnout_values, interest_values = candidate_series(rows, candidate)
        excluded = len(rows) - len(interest_values)
        if excluded:
            logger.debug(f"  {candidate}: excluded {excluded} rows without a value")
        correlations[candidate] = pearson_correlation(turnout_values, interest_values)
        logger.info(f"  📊 {candidate}: r = {correlations[candidate]:.3f}")

    return MappingProxyType(correlations)
