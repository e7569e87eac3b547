"""Tests for the CSV record parser."""

from vehicle_ledger.interchange import parse_csv


class TestParseCsv:
    """Header-keyed parsing and tolerance of malformed input."""

    def test_parses_rows_keyed_by_header(self):
        """Test that each data line becomes a dict keyed by header."""
        result = parse_csv("Car Name,Date,Mileage\nMy Car,2024-01-15,15000\n")

        assert result.rows == [
            {"Car Name": "My Car", "Date": "2024-01-15", "Mileage": "15000"}
        ]
        assert result.diagnostics == []

    def test_trims_headers_and_values(self):
        """Test that surrounding whitespace is removed."""
        result = parse_csv(" Car Name , Date \n  My Car  , 2024-01-15 \n")

        assert result.rows == [{"Car Name": "My Car", "Date": "2024-01-15"}]

    def test_strips_byte_order_mark(self):
        """Test that a UTF-8 BOM does not end up in the first header."""
        result = parse_csv("\ufeffCar Name,Date\nMy Car,2024-01-15\n")

        assert "Car Name" in result.rows[0]

    def test_skips_blank_lines(self):
        """Test that empty and whitespace-only lines are ignored."""
        result = parse_csv("Car Name,Date\n\nMy Car,2024-01-15\n , \n")

        assert len(result.rows) == 1

    def test_quoted_cells_keep_commas_and_quotes(self):
        """Test that RFC 4180 quoting is honoured."""
        result = parse_csv('Car Name,Notes\nMy Car,"Paid, then ""refunded"""\n')

        assert result.rows[0]["Notes"] == 'Paid, then "refunded"'

    def test_short_row_is_padded_with_diagnostic(self):
        """Test that missing cells become empty strings."""
        result = parse_csv("Car Name,Date,Mileage\nMy Car\n")

        assert result.rows == [{"Car Name": "My Car", "Date": "", "Mileage": ""}]
        assert result.diagnostics == ["Line 2: expected 3 fields but found 1"]

    def test_long_row_drops_surplus_cells(self):
        """Test that extra cells are ignored and reported."""
        result = parse_csv("Car Name,Date\nMy Car,2024-01-15,extra\n")

        assert result.rows == [{"Car Name": "My Car", "Date": "2024-01-15"}]
        assert result.diagnostic_count == 1

    def test_empty_input_yields_no_rows(self):
        assert parse_csv("").rows == []
        assert parse_csv("   \n\n").rows == []

    def test_header_only_yields_no_rows(self):
        result = parse_csv("Car Name,Date,Mileage\n")

        assert result.rows == []
        assert result.diagnostics == []

    def test_preserves_file_order(self):
        """Test that rows come back in the order they appear."""
        text = "Car Name,Amount\nA,1\nB,2\nC,3\n"

        names = [row["Car Name"] for row in parse_csv(text).rows]

        assert names == ["A", "B", "C"]
