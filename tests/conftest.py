"""Shared fixtures for the pipeline tests."""

import sys

import pytest
from loguru import logger

TRENDS_HEADER = (
    "Regiune,"
    "Nicusor dan: (04.04.2025 – 04.05.2025),"
    "Crin Antonescu: (04.04.2025 – 04.05.2025),"
    "George Simion: (04.04.2025 – 04.05.2025),"
    "Victor Ponta: (04.04.2025 – 04.05.2025)"
)

VOTER_HEADER = "Judet,Înscriși pe liste permanente,LP"


def make_trends_text(*lines: str, preamble: str = "Categorie: Toate categoriile\n\n") -> str:
    return preamble + TRENDS_HEADER + "\n" + "\n".join(lines) + "\n"


def make_voter_text(*rows: str) -> str:
    return VOTER_HEADER + "\n" + "\n".join(rows) + "\n"


@pytest.fixture
def cluj_voter_text():
    return make_voter_text("Cluj,1000,300", "Cluj,500,150")


@pytest.fixture
def cluj_trends_text():
    return make_trends_text("Cluj,10 %,20 %,30 %,40 %")


@pytest.fixture
def county_voter_text():
    """Voter roll keyed by county code, as in the published presence files."""
    return make_voter_text(
        "AB,1000,200",
        "AB,1000,220",
        "CJ,3000,900",
        "B,10000,3500",
        "IS,2000,380",
        "TM,1500,375",
        "XX,100,50",
    )


@pytest.fixture
def county_trends_text():
    return make_trends_text(
        "Județul Alba,20 %,25 %,40 %,15 %",
        "Județul Cluj,35 %,20 %,25 %,20 %",
        "Municipiul București,45 %,20 %,15 %,20 %",
        "Județul Iași,25 %,25 %,35 %,15 %",
        "Județul Timiș,30 %,,30 %,20 %",
        "Județul Vaslui,10 %,30 %,50 %,10 %",
    )


@pytest.fixture(autouse=True)
def reset_logger():
    """CLI tests swap the loguru sinks; restore a plain stderr sink afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="DEBUG")
