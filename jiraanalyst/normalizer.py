"""
normalizer.py

Turns a loosely structured grid (spreadsheet export, pasted table, live Jira rows) into a
header row plus the rows that carry an issue key. Title rows, blank rows and notes above or
between the data are discarded; nothing is reordered and no cell value is changed.
"""
from typing import Optional

from jiraanalyst.constants import ISSUE_KEY_RE
from jiraanalyst.models import NormalizedTable, RawTable, Row, cell_to_text
from jiraanalyst.utils.logging import contextual_log


def has_issue_key(row: Row) -> bool:
    """True when at least one cell contains something shaped like PROJ-123."""
    return any(ISSUE_KEY_RE.search(cell_to_text(cell)) for cell in (row or ()))


def is_blank_row(row: Row) -> bool:
    return "".join(cell_to_text(cell) for cell in (row or ())).strip() == ""


def find_first_key_row(raw_table: RawTable) -> Optional[int]:
    for index, row in enumerate(raw_table or ()):
        if has_issue_key(row):
            return index
    return None


def normalize(raw_table: RawTable) -> Optional[NormalizedTable]:
    """
    Locate the header and the issue rows of raw_table.

    The header is the row right above the first row containing an issue key. When that
    first key row is the very first row there is no real header, so the row is used as both
    header and data; the extractor treats the header purely as column names and would
    otherwise never see that issue.

    Returns None when no row contains an issue key.
    """
    start = find_first_key_row(raw_table)
    if start is None:
        contextual_log('info', "[normalizer] No issue-key rows found.", operation="normalize", status="empty", row_count=len(raw_table or ()))
        return None
    header = raw_table[start - 1] if start > 0 else raw_table[start]
    kept = [
        tuple(row)
        for row in raw_table[start:]
        if has_issue_key(row) and not is_blank_row(row)
    ]
    contextual_log('debug', f"[normalizer] Header at row {max(start - 1, 0)}, kept {len(kept)} of {len(raw_table) - start} rows.", operation="normalize", status="success", issue_count=len(kept))
    return NormalizedTable(header=tuple(header or ()), rows=tuple(kept))
