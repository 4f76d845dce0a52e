"""
normalize_table.py

Shows which header and rows would be sent for analysis, without calling the AI service.
Useful to check a messy spreadsheet before spending a report request on it.
"""
from rich.table import Table

from jiraanalyst.constants import NO_USABLE_DATA
from jiraanalyst.errors import NoUsableDataError
from jiraanalyst.features.jira_report import load_raw_table
from jiraanalyst.models import cell_to_text
from jiraanalyst.normalizer import normalize
from jiraanalyst.utils.decorators import feature_error_handler
from jiraanalyst.utils.message_utils import info
from jiraanalyst.utils.rich_prompt import console


@feature_error_handler('normalize_table')
def normalize_table(params: dict, loader, interactive: bool = False):
    raw_table = load_raw_table(params, loader, interactive=interactive)
    table = normalize(raw_table)
    if table is None or len(table) < 2:
        raise NoUsableDataError(NO_USABLE_DATA)
    if params.get('json'):
        console.print_json(table.to_json())
        return table
    width = max(len(row) for row in table.as_rows())
    view = Table(title="Normalized table", show_lines=False)
    for index in range(width):
        name = cell_to_text(table.header[index]) if index < len(table.header) else ""
        view.add_column(name or f"column_{index + 1}")
    for row in table.rows:
        cells = [cell_to_text(cell) for cell in row]
        view.add_row(*(cells + [""] * (width - len(cells))))
    console.print(view)
    info(f"{len(table.rows)} of {len(raw_table)} input rows contain an issue key.")
    return table
