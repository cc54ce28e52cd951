"""
Value types flowing through the processing pipeline.

Every entity is produced once per run and never mutated afterwards, so all
of them are frozen dataclasses.
"""

from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

# Fixed candidate identifiers, in display order of the source export
CANDIDATES: Tuple[str, ...] = (
    "nicusor_dan",
    "crin_antonescu",
    "george_simion",
    "victor_ponta",
)


@dataclass(frozen=True)
class VoterRecord:
    """One row of the voter roll."""

    county: str
    registered: int
    turned_out: int


@dataclass(frozen=True)
class CountyTurnout:
    """Registered and turned-out totals for one county."""

    county: str
    total_registered: int
    total_turned_out: int
    turnout_percentage: float


@dataclass(frozen=True)
class TrendsRecord:
    """Search interest (0-100) per candidate for one county."""

    county: str
    nicusor_dan: Optional[float] = None
    crin_antonescu: Optional[float] = None
    george_simion: Optional[float] = None
    victor_ponta: Optional[float] = None

    def interest(self, candidate: str) -> Optional[float]:
        if candidate not in CANDIDATES:
            raise KeyError(f"Unknown candidate: {candidate}")
        return getattr(self, candidate)


@dataclass(frozen=True)
class JoinedRow:
    """A county present in both the voter roll and the trends export."""

    county: str
    county_code: str
    turnout_percentage: float
    nicusor_dan: Optional[float] = None
    crin_antonescu: Optional[float] = None
    george_simion: Optional[float] = None
    victor_ponta: Optional[float] = None

    def interest(self, candidate: str) -> Optional[float]:
        if candidate not in CANDIDATES:
            raise KeyError(f"Unknown candidate: {candidate}")
        return getattr(self, candidate)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _empty_correlations() -> Mapping[str, float]:
    return MappingProxyType({candidate: 0.0 for candidate in CANDIDATES})


@dataclass(frozen=True)
class PipelineResult:
    """Joined rows plus per-candidate correlation, handed to presentation."""

    rows: Tuple[JoinedRow, ...] = ()
    correlations: Mapping[str, float] = field(default_factory=_empty_correlations)

    @property
    def is_empty(self) -> bool:
        return not self.rows
