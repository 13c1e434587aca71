"""Decode roster spreadsheets into raw row mappings."""

from __future__ import annotations

import csv
import io
import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, List

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException


logger = logging.getLogger(__name__)

CSV_SUFFIXES = {".csv"}
EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
SUPPORTED_SUFFIXES = CSV_SUFFIXES | EXCEL_SUFFIXES


class SpreadsheetParseError(ValueError):
    """Raised when a roster file cannot be decoded into rows."""


def _read_csv(contents: bytes) -> List[Dict[str, Any]]:
    try:
        text = contents.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SpreadsheetParseError(f"CSV file is not valid UTF-8: {exc}") from exc
    try:
        reader = csv.DictReader(io.StringIO(text, newline=""))
        rows: List[Dict[str, Any]] = []
        for raw in reader:
            rows.append({key: value for key, value in raw.items() if key is not None})
    except csv.Error as exc:
        raise SpreadsheetParseError(f"Malformed CSV: {exc}") from exc
    return rows


def _read_excel(contents: bytes) -> List[Dict[str, Any]]:
    try:
        workbook = load_workbook(io.BytesIO(contents), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise SpreadsheetParseError(f"Unable to open workbook: {exc}") from exc

    try:
        worksheet = workbook.worksheets[0] if workbook.worksheets else None
        if worksheet is None:
            return []
        row_iter = worksheet.iter_rows(values_only=True)
        header_row = next(row_iter, None)
        if header_row is None:
            return []
        headers = [
            (idx, str(cell).strip())
            for idx, cell in enumerate(header_row)
            if cell is not None and str(cell).strip()
        ]
        rows: List[Dict[str, Any]] = []
        for values in row_iter:
            record: Dict[str, Any] = {}
            for idx, header in headers:
                value = values[idx] if idx < len(values) else None
                if value is None:
                    continue
                record[header] = value
            rows.append(record)
    finally:
        workbook.close()
    return rows


def read_rows(contents: bytes, *, filename: str) -> List[Dict[str, Any]]:
    """Decode spreadsheet bytes based on the file extension.

    Blank workbook rows come back as empty mappings so row numbers follow the
    sheet. CSV input drops fully empty lines, as csv.DictReader does.
    """

    suffix = Path(filename).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise SpreadsheetParseError(
            f"Unsupported file type {suffix or filename!r}; expected one of {sorted(SUPPORTED_SUFFIXES)}"
        )
    if suffix in CSV_SUFFIXES:
        rows = _read_csv(contents)
    else:
        rows = _read_excel(contents)
    logger.debug("Decoded %s rows from %s", len(rows), filename)
    return rows


def load_rows(path: Path) -> List[Dict[str, Any]]:
    try:
        contents = path.read_bytes()
    except OSError as exc:
        raise SpreadsheetParseError(f"Unable to read {path}: {exc}") from exc
    return read_rows(contents, filename=path.name)
