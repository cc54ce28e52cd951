"""Tests for voter roll parsing and county turnout aggregation."""

import pytest

from processing.errors import IngestionError
from processing.models import VoterRecord
from processing.turnout import aggregate_turnout, aggregate_turnout_text, parse_voter_records
from tests.conftest import make_voter_text


class TestParseVoterRecords:
    def test_parses_rows(self, cluj_voter_text):
        records = parse_voter_records(cluj_voter_text)

        assert records == [
            VoterRecord(county="Cluj", registered=1000, turned_out=300),
            VoterRecord(county="Cluj", registered=500, turned_out=150),
        ]

    def test_non_numeric_and_empty_counts_are_zero(self):
        text = make_voter_text("CJ,abc,100", "CJ,200,")

        records = parse_voter_records(text)

        assert [(r.registered, r.turned_out) for r in records] == [(0, 100), (200, 0)]

    def test_rows_without_county_are_dropped(self):
        text = make_voter_text(",1000,300", "AB,100,10")

        records = parse_voter_records(text)

        assert [r.county for r in records] == ["AB"]

    def test_blank_lines_are_skipped(self):
        text = make_voter_text("AB,100,10", "", "AB,100,20")

        assert len(parse_voter_records(text)) == 2

    def test_extra_columns_are_ignored(self):
        text = "Judet,UAT,Înscriși pe liste permanente,LP\nAB,Alba Iulia,100,40\n"

        assert parse_voter_records(text) == [VoterRecord("AB", 100, 40)]

    def test_custom_column_names(self):
        text = "county,registered,voted\nCJ,100,25\n"

        records = parse_voter_records(
            text, county_column="county", registered_column="registered", turned_out_column="voted"
        )

        assert records == [VoterRecord("CJ", 100, 25)]

    def test_missing_column_raises(self):
        text = "Judet,LP\nCJ,100\n"

        with pytest.raises(IngestionError, match="missing required columns"):
            parse_voter_records(text)

    def test_empty_text_raises(self):
        with pytest.raises(IngestionError):
            parse_voter_records("")

    def test_row_with_extra_field_is_skipped(self):
        text = make_voter_text("CJ,1000,300", "CJ,500,150,oops", "AB,100,10")

        records = parse_voter_records(text)

        assert records == [VoterRecord("CJ", 1000, 300), VoterRecord("AB", 100, 10)]

    def test_extra_field_in_first_row_does_not_shift_columns(self):
        text = make_voter_text("CJ,1000,300,oops", "AB,100,10")

        records = parse_voter_records(text)

        assert records == [VoterRecord("AB", 100, 10)]

    def test_short_row_counts_missing_cells_as_zero(self):
        text = make_voter_text("CJ,1000", "AB,100,10")

        records = parse_voter_records(text)

        assert records == [VoterRecord("CJ", 1000, 0), VoterRecord("AB", 100, 10)]

    def test_header_only_gives_no_records(self):
        assert parse_voter_records("Judet,Înscriși pe liste permanente,LP\n") == []


class TestAggregateTurnout:
    def test_sums_per_county(self, cluj_voter_text):
        turnout = aggregate_turnout_text(cluj_voter_text)

        cluj = turnout["Cluj"]
        assert cluj.total_registered == 1500
        assert cluj.total_turned_out == 450
        assert cluj.turnout_percentage == pytest.approx(30.0)

    def test_zero_registered_gives_zero_percentage(self):
        turnout = aggregate_turnout([VoterRecord("AB", 0, 0), VoterRecord("AR", 0, 15)])

        assert turnout["AB"].turnout_percentage == 0.0
        assert turnout["AR"].turnout_percentage == 0.0

    def test_malformed_rows_do_not_abort_aggregation(self):
        text = make_voter_text("CJ,1000,300", "CJ,500,150,oops", "CJ,500,150")

        turnout = aggregate_turnout_text(text)

        assert turnout["CJ"].total_registered == 1500
        assert turnout["CJ"].turnout_percentage == pytest.approx(30.0)

    def test_groups_multiple_counties(self, county_voter_text):
        turnout = aggregate_turnout_text(county_voter_text)

        assert set(turnout) == {"AB", "CJ", "B", "IS", "TM", "XX"}
        assert turnout["AB"].total_registered == 2000
        assert turnout["AB"].turnout_percentage == pytest.approx(21.0)
        assert turnout["B"].turnout_percentage == pytest.approx(35.0)

    def test_no_records(self):
        assert aggregate_turnout([]) == {}
