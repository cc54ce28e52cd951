"""Tests for the search interest export parser."""

import pytest

from processing.models import TrendsRecord
from processing.trends import find_header_index, parse_percentage, parse_trends
from tests.conftest import TRENDS_HEADER, make_trends_text


class TestParsePercentage:
    @pytest.mark.parametrize(
        "cell, expected",
        [("43 %", 43.0), ("43%", 43.0), (" 7.5 % ", 7.5), ("100", 100.0), ("0 %", 0.0)],
    )
    def test_valid_cells(self, cell, expected):
        assert parse_percentage(cell) == expected

    @pytest.mark.parametrize("cell", ["", " ", "%", "<1 %", "n/a", "nan", "inf %"])
    def test_invalid_cells_are_missing(self, cell):
        assert parse_percentage(cell) is None


class TestParseTrends:
    def test_parses_rows_after_header(self, cluj_trends_text):
        records = parse_trends(cluj_trends_text)

        assert records == [
            TrendsRecord(
                county="Cluj",
                nicusor_dan=10.0,
                crin_antonescu=20.0,
                george_simion=30.0,
                victor_ponta=40.0,
            )
        ]

    def test_strips_county_prefixes(self, county_trends_text):
        records = parse_trends(county_trends_text)

        assert [r.county for r in records] == [
            "Alba",
            "Cluj",
            "București",
            "Iași",
            "Timiș",
            "Vaslui",
        ]

    def test_missing_header_returns_empty(self):
        text = "Categorie: Toate categoriile\n\nRegion,A,B\nCluj,10 %,20 %\n"

        assert parse_trends(text) == []

    def test_empty_text_returns_empty(self):
        assert parse_trends("") == []

    def test_header_must_start_the_line(self):
        text = " " + TRENDS_HEADER + "\nCluj,10 %,20 %,30 %,40 %\n"

        assert parse_trends(text) == []

    def test_short_lines_are_skipped(self):
        text = make_trends_text("Cluj,10 %,20 %", "Alba,1 %,2 %,3 %,4 %")

        records = parse_trends(text)

        assert [r.county for r in records] == ["Alba"]

    def test_blank_cells_are_missing_not_zero(self):
        text = make_trends_text("Județul Timiș,30 %,,30 %,20 %")

        (record,) = parse_trends(text)

        assert record.crin_antonescu is None
        assert record.nicusor_dan == 30.0

    def test_unknown_columns_are_ignored(self):
        text = (
            "Regiune,Nicusor dan: (04.04.2025 – 04.05.2025),Altcineva: (04.04.2025 – 04.05.2025)\n"
            "Cluj,55 %,45 %\n"
        )

        (record,) = parse_trends(text)

        assert record.nicusor_dan == 55.0
        assert record.crin_antonescu is None
        assert record.george_simion is None
        assert record.victor_ponta is None

    def test_label_must_match_exactly(self):
        text = "Regiune,Nicusor Dan: (04.04.2025 - 04.05.2025)\nCluj,55 %\n"

        (record,) = parse_trends(text)

        assert record.nicusor_dan is None

    def test_handles_crlf_line_endings(self, cluj_trends_text):
        crlf = cluj_trends_text.replace("\n", "\r\n")

        assert parse_trends(crlf) == parse_trends(cluj_trends_text)

    def test_parsing_is_idempotent(self, county_trends_text):
        assert parse_trends(county_trends_text) == parse_trends(county_trends_text)


class TestFindHeaderIndex:
    def test_first_match_wins(self):
        lines = ["intro", "Regiune,a", "Regiune,b"]

        assert find_header_index(lines) == 1

    def test_not_found(self):
        assert find_header_index(["a", "b"]) == -1
