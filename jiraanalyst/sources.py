"""
sources.py

Readers that turn user input into a raw table (list of rows of cell values): Excel
workbooks, pasted tab-separated text, and CSV exports. Rows keep whatever shape the source
had; finding the header and the issue rows is the normalizer's job.
"""
import csv
import io
import os
import zipfile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from jiraanalyst.errors import SourceError
from jiraanalyst.utils.logging import contextual_log

SPREADSHEET_EXTENSIONS = ('.xlsx', '.xlsm')
TEXT_EXTENSIONS = ('.tsv', '.txt', '.csv')


def _trim_row(row):
    cells = list(row)
    while cells and (cells[-1] is None or (isinstance(cells[-1], str) and not cells[-1].strip())):
        cells.pop()
    return cells


def read_spreadsheet(source, sheet_name=None):
    """
    Read the values of one worksheet (the active one unless sheet_name is given).
    Args:
        source: Path or binary file-like object of an .xlsx/.xlsm workbook.
        sheet_name (str, optional): Worksheet to read.
    Returns:
        list[list]: One list per worksheet row, trailing empty cells removed.
    """
    try:
        wb = load_workbook(source, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise SourceError(f"Could not read the spreadsheet: {e}") from e
    try:
        if sheet_name:
            if sheet_name not in wb.sheetnames:
                raise SourceError(f"Worksheet '{sheet_name}' not found. Available: {', '.join(wb.sheetnames)}")
            ws = wb[sheet_name]
        else:
            ws = wb.active
        rows = [_trim_row(row) for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()
    contextual_log('info', f"[sources] Read {len(rows)} rows from worksheet '{ws.title}'.", operation="read_spreadsheet", source="file")
    return rows


def parse_pasted_text(text):
    """
    Split pasted table text into rows. Cells are tab-separated (as copied from a spreadsheet,
    which quotes cells containing line breaks); text without any tab but with commas is read
    as CSV instead.
    """
    if text is None:
        return []
    if not isinstance(text, str):
        raise SourceError("Pasted data must be text.")
    text = text.lstrip('\ufeff')
    if not text.strip():
        return []
    if '\t' not in text and ',' in text:
        return parse_csv_text(text)
    return parse_csv_text(text, delimiter='\t')


def parse_csv_text(text, delimiter=','):
    reader = csv.reader(io.StringIO(text, newline=''), delimiter=delimiter)
    try:
        return [row for row in reader]
    except csv.Error as e:
        raise SourceError(f"Could not parse the table text: {e}") from e


def load_table(path, sheet_name=None):
    """Read a raw table from a file, choosing the reader by extension."""
    ext = os.path.splitext(path)[1].lower()
    if not os.path.exists(path):
        raise SourceError(f"File not found: {path}")
    if ext in SPREADSHEET_EXTENSIONS:
        return read_spreadsheet(path, sheet_name=sheet_name)
    if ext in TEXT_EXTENSIONS:
        with open(path, 'r', encoding='utf-8-sig') as f:
            text = f.read()
        if ext == '.csv':
            return parse_csv_text(text)
        return parse_pasted_text(text)
    raise SourceError(f"Unsupported file type '{ext or path}'. Use .xlsx, .xlsm, .csv, .tsv or .txt.")


def load_upload(filename, stream):
    """Read a raw table from an uploaded file (name + binary stream)."""
    ext = os.path.splitext(filename or '')[1].lower()
    if ext in SPREADSHEET_EXTENSIONS:
        return read_spreadsheet(io.BytesIO(stream.read()))
    if ext in TEXT_EXTENSIONS:
        try:
            text = stream.read().decode('utf-8-sig')
        except UnicodeDecodeError as e:
            raise SourceError(f"Uploaded file is not UTF-8 text: {e}") from e
        if ext == '.csv':
            return parse_csv_text(text)
        return parse_pasted_text(text)
    raise SourceError(f"Unsupported file type '{ext or filename}'. Use .xlsx, .xlsm, .csv, .tsv or .txt.")
