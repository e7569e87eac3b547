"""CSV interchange package: column contract, parser, exporter, samples."""

from vehicle_ledger.interchange import columns
from vehicle_ledger.interchange.columns import columns_for
from vehicle_ledger.interchange.parser import parse_csv
from vehicle_ledger.interchange.exporter import (
    export_entries,
    export_filename,
    filter_entries,
    format_decimal,
)
from vehicle_ledger.interchange.templates import SAMPLE_FILENAMES, sample_csv

__all__ = [
    "SAMPLE_FILENAMES",
    "columns",
    "columns_for",
    "export_entries",
    "export_filename",
    "filter_entries",
    "format_decimal",
    "parse_csv",
    "sample_csv",
]
