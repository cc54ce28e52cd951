"""
dashboard.py - Charts and narrative for the turnout / search interest results

Reads a PipelineResult and renders:
- scatter: turnout vs. search interest for the active candidate
- correlations: bar chart of the coefficient per candidate
- interest: pie chart of mean search interest share per candidate

Usage:
    from analysis.dashboard import render_dashboard

    paths = render_dashboard(result, "output/charts", view="all")
"""

from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

import matplotlib as mpl

mpl.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import seaborn as sns  # noqa: E402
from loguru import logger  # noqa: E402

from processing.models import CANDIDATES, JoinedRow, PipelineResult  # noqa: E402

CANDIDATE_TITLES: Mapping[str, str] = {
    "nicusor_dan": "Nicușor Dan",
    "crin_antonescu": "Crin Antonescu",
    "george_simion": "George Simion",
    "victor_ponta": "Victor Ponta",
}

CANDIDATE_COLORS: Mapping[str, str] = {
    "nicusor_dan": "#8884d8",
    "crin_antonescu": "#82ca9d",
    "george_simion": "#ffc658",
    "victor_ponta": "#ff8042",
}

DEFAULT_CANDIDATE = "victor_ponta"
STRENGTH_THRESHOLD = 0.2

VIEWS = ("scatter", "correlations", "interest")

STRENGTH_LABELS = {
    "positive": "Corelație pozitivă puternică",
    "negative": "Corelație negativă puternică",
    "weak": "Corelație slabă/inexistentă",
}


def candidate_title(candidate: str) -> str:
    return CANDIDATE_TITLES.get(candidate, candidate)


def candidate_color(candidate: str) -> str:
    return CANDIDATE_COLORS.get(candidate, "#000000")


def format_correlation(value: float) -> str:
    return f"{value:.3f}"


def format_number(value: float) -> str:
    return f"{value:.2f}"


def classify_correlation(value: float, threshold: float = STRENGTH_THRESHOLD) -> str:
    """'positive' above threshold, 'negative' below -threshold, else 'weak'."""
    if value > threshold:
        return "positive"
    if value < -threshold:
        return "negative"
    return "weak"


def describe_correlation(
    candidate: str, value: float, threshold: float = STRENGTH_THRESHOLD
) -> str:
    """One-sentence reading of a candidate's coefficient."""
    title = candidate_title(candidate)
    strength = classify_correlation(value, threshold)
    r = format_correlation(value)

    if strength == "positive":
        return (
            f"{title} arată o corelație pozitivă ({r}) cu prezența la vot: zonele cu un interes "
            f"mai mare de căutare pentru {title} tind să aibă rate de participare mai ridicate."
        )
    if strength == "negative":
        return (
            f"{title} arată o corelație negativă ({r}) cu prezența la vot: zonele cu un interes "
            f"mai mare de căutare pentru {title} tind să aibă rate de participare mai scăzute."
        )
    return f"{title} nu prezintă o corelație semnificativă ({r}) cu prezența la vot."


def summarize(
    correlations: Mapping[str, float], threshold: float = STRENGTH_THRESHOLD
) -> List[str]:
    """Narrative lines for every candidate, strongest relationship first."""
    ordered = sorted(CANDIDATES, key=lambda c: abs(correlations.get(c, 0.0)), reverse=True)
    return [describe_correlation(c, correlations.get(c, 0.0), threshold) for c in ordered]


def format_row(row: JoinedRow, candidate: str) -> str:
    """Tooltip-style description of one county for the active candidate."""
    value = row.interest(candidate)
    interest = "n/a" if value is None else f"{value:g}%"
    return (
        f"{row.county} ({row.county_code}) | "
        f"Prezență la vot: {format_number(row.turnout_percentage)}% | "
        f"{candidate_title(candidate)}: {interest}"
    )


def filter_rows(
    rows: Iterable[JoinedRow],
    min_turnout: Optional[float] = None,
    max_turnout: Optional[float] = None,
    counties: Optional[Iterable[str]] = None,
) -> List[JoinedRow]:
    """Keep rows inside the turnout range and, if given, the listed counties.

    ``counties`` may hold display names or county codes.
    """
    wanted = set(counties) if counties else None
    selected = []
    for row in rows:
        if min_turnout is not None and row.turnout_percentage < min_turnout:
            continue
        if max_turnout is not None and row.turnout_percentage > max_turnout:
            continue
        if wanted is not None and row.county not in wanted and row.county_code not in wanted:
            continue
        selected.append(row)
    return selected


def mean_interest(rows: Sequence[JoinedRow]) -> Dict[str, float]:
    """Average search interest per candidate, ignoring missing values."""
    means = {}
    for candidate in CANDIDATES:
        values = [row.interest(candidate) for row in rows if row.interest(candidate) is not None]
        means[candidate] = float(np.mean(values)) if values else 0.0
    return means


def _setup_style() -> None:
    sns.set_theme(style="whitegrid", context="notebook")
    plt.rcParams.update({"axes.spines.right": False, "axes.spines.top": False})


def _save(fig: plt.Figure, fname: Path, dpi: int) -> Path:
    fname.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(fname, bbox_inches="tight", dpi=dpi, facecolor="white", edgecolor="none")
    plt.close(fig)
    logger.success(f"  🖼️ Chart saved: {fname}")
    return fname


def plot_scatter(
    rows: Sequence[JoinedRow],
    candidate: str,
    fname: Union[str, Path],
    correlation: Optional[float] = None,
    turnout_domain: Sequence[float] = (15, 35),
    interest_domain: Sequence[float] = (0, 70),
    figsize: Sequence[float] = (10, 7),
    dpi: int = 150,
) -> Path:
    """Scatter of turnout (x) against the candidate's search interest (y)."""
    _setup_style()
    points = [(r.turnout_percentage, r.interest(candidate), r.county_code) for r in rows]
    points = [p for p in points if p[1] is not None]

    fig, ax = plt.subplots(figsize=tuple(figsize), dpi=dpi)
    if points:
        xs, ys, codes = zip(*points)
        ax.scatter(xs, ys, color=candidate_color(candidate), s=60, edgecolor="#444444", linewidth=0.5)
        for x, y, code in points:
            ax.annotate(code, (x, y), textcoords="offset points", xytext=(4, 4), fontsize=8)

    ax.set_xlim(*turnout_domain)
    ax.set_ylim(*interest_domain)
    ax.set_xlabel("Prezență la vot (%)")
    ax.set_ylabel(f"Interes de căutare pentru {candidate_title(candidate)} (%)")

    title = f"Prezență la vot vs. interes de căutare: {candidate_title(candidate)}"
    if correlation is not None:
        title += f" (r = {format_correlation(correlation)})"
    ax.set_title(title, fontsize=13, fontweight="bold", loc="left")

    return _save(fig, Path(fname), dpi)


def plot_correlation_bars(
    correlations: Mapping[str, float],
    fname: Union[str, Path],
    threshold: float = STRENGTH_THRESHOLD,
    figsize: Sequence[float] = (10, 7),
    dpi: int = 150,
) -> Path:
    """Bar per candidate with the strength threshold marked."""
    _setup_style()
    values = [correlations.get(c, 0.0) for c in CANDIDATES]

    fig, ax = plt.subplots(figsize=tuple(figsize), dpi=dpi)
    bars = ax.bar(
        [candidate_title(c) for c in CANDIDATES],
        values,
        color=[candidate_color(c) for c in CANDIDATES],
        edgecolor="#444444",
        linewidth=0.5,
    )
    for bar, value in zip(bars, values):
        ax.annotate(
            format_correlation(value),
            (bar.get_x() + bar.get_width() / 2, value),
            textcoords="offset points",
            xytext=(0, 4 if value >= 0 else -12),
            ha="center",
            fontsize=9,
        )

    ax.axhline(0, color="#333333", linewidth=0.8)
    for level in (threshold, -threshold):
        ax.axhline(level, color="#999999", linewidth=0.8, linestyle="--")
    ax.set_ylim(-1, 1)
    ax.set_ylabel("Coeficient de corelație (Pearson r)")
    ax.set_title("Corelația cu prezența la vot", fontsize=13, fontweight="bold", loc="left")

    return _save(fig, Path(fname), dpi)


def plot_interest_share(
    rows: Sequence[JoinedRow],
    fname: Union[str, Path],
    figsize: Sequence[float] = (8, 8),
    dpi: int = 150,
) -> Optional[Path]:
    """Pie of each candidate's share of mean search interest."""
    means = mean_interest(rows)
    if sum(means.values()) <= 0:
        logger.warning("  ⚠️ No search interest values to chart")
        return None

    _setup_style()
    fig, ax = plt.subplots(figsize=tuple(figsize), dpi=dpi)
    ax.pie(
        [means[c] for c in CANDIDATES],
        labels=[candidate_title(c) for c in CANDIDATES],
        colors=[candidate_color(c) for c in CANDIDATES],
        autopct="%1.1f%%",
        startangle=90,
        wedgeprops={"edgecolor": "white"},
    )
    ax.set_title("Distribuția interesului de căutare", fontsize=13, fontweight="bold")
    ax.axis("equal")

    return _save(fig, Path(fname), dpi)


def render_dashboard(
    result: PipelineResult,
    output_dir: Union[str, Path],
    view: str = "all",
    candidate: str = DEFAULT_CANDIDATE,
    min_turnout: Optional[float] = None,
    max_turnout: Optional[float] = None,
    counties: Optional[Iterable[str]] = None,
    settings: Optional[Mapping] = None,
) -> List[Path]:
    """Render the requested view(s) into output_dir.

    Args:
        result: Output of the processing pipeline
        output_dir: Directory for the PNG files
        view: One of ``scatter``, ``correlations``, ``interest`` or ``all``
        candidate: Active candidate for the scatter view
        min_turnout: Lower turnout bound for the charted counties
        max_turnout: Upper turnout bound for the charted counties
        counties: Display names or codes of the counties to chart; all when empty
        settings: Visualization settings (dpi, figure size, axis domains, threshold)

    Returns:
        Paths of the written charts; empty when nothing could be correlated
    """
    if view != "all" and view not in VIEWS:
        raise ValueError(f"Unknown view '{view}'. Expected one of {VIEWS + ('all',)}")
    if candidate not in CANDIDATES:
        raise ValueError(f"Unknown candidate '{candidate}'. Expected one of {CANDIDATES}")

    if result.is_empty:
        logger.warning("⚠️ Nu s-au putut corela datele - no charts rendered")
        return []

    settings = settings or {}
    dpi = int(settings.get("dpi", 150))
    figsize = (settings.get("figure_width", 10), settings.get("figure_height", 7))
    threshold = float(settings.get("strength_threshold", STRENGTH_THRESHOLD))

    rows = filter_rows(
        result.rows, min_turnout=min_turnout, max_turnout=max_turnout, counties=counties
    )
    logger.info(f"🎨 Rendering '{view}' view for {len(rows)}/{len(result.rows)} counties")

    output_dir = Path(output_dir)
    views = VIEWS if view == "all" else (view,)
    written: List[Path] = []

    for name in views:
        if name == "scatter":
            written.append(
                plot_scatter(
                    rows,
                    candidate,
                    output_dir / f"scatter_{candidate}.png",
                    correlation=result.correlations.get(candidate),
                    turnout_domain=settings.get("turnout_domain", (15, 35)),
                    interest_domain=settings.get("interest_domain", (0, 70)),
                    figsize=figsize,
                    dpi=dpi,
                )
            )
        elif name == "correlations":
            written.append(
                plot_correlation_bars(
                    result.correlations,
                    output_dir / "correlations.png",
                    threshold=threshold,
                    figsize=figsize,
                    dpi=dpi,
                )
            )
        else:
            path = plot_interest_share(rows, output_dir / "interest_share.png", dpi=dpi)
            if path is not None:
                written.append(path)

    return written
