"""
trends.py - Search interest export parser

The export is not a rectangular CSV: a few descriptive lines come first,
then a header line starting with ``Regiune,``, then one line per region:

    Categorie: Toate categoriile

    Regiune,Nicusor dan: (04.04.2025 – 04.05.2025),...
    Județul Cluj,10 %,20 %,30 %,40 %

If the header line is missing the parser returns no records instead of
raising; callers treat an empty result as "could not correlate".
"""

import math
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from loguru import logger

from .county_codes import normalize_county_name
from .models import TrendsRecord

HEADER_PREFIX = "Regiune,"

# Exact column labels of the export, date range included
CANDIDATE_COLUMNS: Mapping[str, str] = MappingProxyType(
    {
        "Nicusor dan: (04.04.2025 – 04.05.2025)": "nicusor_dan",
        "Crin Antonescu: (04.04.2025 – 04.05.2025)": "crin_antonescu",
        "George Simion: (04.04.2025 – 04.05.2025)": "george_simion",
        "Victor Ponta: (04.04.2025 – 04.05.2025)": "victor_ponta",
    }
)


def parse_percentage(cell: str) -> Optional[float]:
    """Parse a cell like ``"43 %"`` into 43.0; blank or garbage gives None."""
    value = cell.strip()
    if value.endswith("%"):
        value = value[:-1].strip()
    if not value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def find_header_index(lines: List[str]) -> int:
    """Index of the first line starting with the header prefix, or -1."""
    for i, line in enumerate(lines):
        if line.startswith(HEADER_PREFIX):
            return i
    return -1


def parse_trends(text: str) -> List[TrendsRecord]:
    """Parse the trends export into one TrendsRecord per region line.

    Lines with fewer fields than the header are skipped. Unknown header
    columns are ignored.
    """
    logger.info("📈 Parsing search interest export...")

    lines = [line for line in text.split("\n") if line.strip()]
    header_index = find_header_index(lines)
    if header_index == -1:
        logger.warning(f"  ⚠️ No header line starting with '{HEADER_PREFIX}' found")
        return []

    headers = [h.strip() for h in lines[header_index].split(",")]
    candidate_positions: Dict[int, str] = {
        position: CANDIDATE_COLUMNS[label]
        for position, label in enumerate(headers)
        if position > 0 and label in CANDIDATE_COLUMNS
    }
    if len(candidate_positions) < len(CANDIDATE_COLUMNS):
        logger.warning(
            f"  ⚠️ Recognized {len(candidate_positions)}/{len(CANDIDATE_COLUMNS)} candidate columns"
        )

    records: List[TrendsRecord] = []
    for line in lines[header_index + 1 :]:
        values = [v.strip() for v in line.split(",")]
        if len(values) < len(headers):
            logger.trace(f"Skipping short line: {line!r}")
            continue

        interest = {
            candidate: parse_percentage(values[position])
            for position, candidate in candidate_positions.items()
        }
        records.append(TrendsRecord(county=normalize_county_name(values[0]), **interest))

    logger.info(f"  ✅ Parsed {len(records)} regions")
    return records
