"""
CSV Record Parser

Turns uploaded text into header-keyed rows.

DESIGN DECISION: The parser is fail-soft. A partially malformed upload
should still produce rows, so the validator can tell the user exactly
which cells are wrong. Structural problems are reported as diagnostics,
never raised:
- Short rows: missing cells become empty strings (the validator then
  reports missing required fields)
- Long rows: surplus cells are dropped
- Unreadable input: no rows, one diagnostic
"""

import csv
import io

import structlog

from vehicle_ledger.models.entries import ParseResult, RowRecord

logger = structlog.get_logger(__name__)

BOM = "\ufeff"


def _clean_headers(fieldnames: list[str]) -> list[str]:
    headers = [name.strip() for name in fieldnames]
    if headers and headers[0].startswith(BOM):
        headers[0] = headers[0][len(BOM):].strip()
    return headers


def parse_csv(raw_text: str) -> ParseResult:
    """
    Parse delimited text with a mandatory header row.

    Every header and value is trimmed. Fully empty lines are skipped.

    Returns:
        ParseResult with the rows in file order and any diagnostics
    """
    if not raw_text or not raw_text.strip():
        return ParseResult()

    diagnostics: list[str] = []
    rows: list[RowRecord] = []

    try:
        reader = csv.reader(io.StringIO(raw_text.lstrip(BOM)))
        header_line = next(reader, None)
        if header_line is None:
            return ParseResult()
        headers = _clean_headers(header_line)

        for cells in reader:
            if not any(cell.strip() for cell in cells):
                continue

            if len(cells) != len(headers):
                diagnostics.append(
                    f"Line {reader.line_num}: expected {len(headers)} fields "
                    f"but found {len(cells)}"
                )

            row: RowRecord = {}
            for index, header in enumerate(headers):
                if not header:
                    continue
                value = cells[index] if index < len(cells) else ""
                row[header] = value.strip()
            rows.append(row)
    except csv.Error as e:
        logger.warning("csv_parse_failed", error=str(e))
        return ParseResult(rows=[], diagnostics=[f"Could not read CSV: {e}"])

    if diagnostics:
        logger.info(
            "csv_parsed_with_diagnostics",
            row_count=len(rows),
            diagnostic_count=len(diagnostics),
        )

    return ParseResult(rows=rows, diagnostics=diagnostics)
