"""Input adapters that turn roster spreadsheets into candidate players."""

from .columns import find_header, match_columns, resolve_field
from .roster import build_import_preview, parse_points, validate_row
from .spreadsheet import SpreadsheetParseError, load_rows, read_rows

__all__ = [
    "SpreadsheetParseError",
    "build_import_preview",
    "find_header",
    "load_rows",
    "match_columns",
    "parse_points",
    "read_rows",
    "resolve_field",
    "validate_row",
]
