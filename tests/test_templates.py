"""Tests for the downloadable sample files."""

import pytest

from vehicle_ledger.interchange import SAMPLE_FILENAMES, columns_for, parse_csv, sample_csv
from vehicle_ledger.models.entries import EntryKind, Vehicle
from vehicle_ledger.validation import EntryValidator


class TestSampleCsv:
    """Every sample must import cleanly for a user who owns "My Car"."""

    @pytest.mark.parametrize("kind", list(EntryKind))
    def test_sample_validates(self, kind, settings):
        parsed = parse_csv(sample_csv(kind))
        roster = [Vehicle(id="car-1", name="My Car")]

        report = EntryValidator(settings).validate_rows(parsed.rows, kind, roster)

        assert parsed.diagnostics == []
        assert report.errors == []
        assert len(report.candidates) == len(parsed.rows) > 0

    @pytest.mark.parametrize("kind", list(EntryKind))
    def test_sample_header_matches_contract(self, kind):
        header = sample_csv(kind).splitlines()[0]

        assert header.split(",") == columns_for(kind)

    def test_every_kind_has_a_filename(self):
        assert set(SAMPLE_FILENAMES) == set(EntryKind)
