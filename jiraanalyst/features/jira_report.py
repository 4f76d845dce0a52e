"""
jira_report.py

Generates the AI summary report for Jira issue data from a spreadsheet, pasted text or a live
Jira project, and writes it as Markdown, plain text or JSON.
"""
import sys

from jiraanalyst.constants import NO_USABLE_DATA
from jiraanalyst.errors import NoUsableDataError, SourceError
from jiraanalyst.jira_client import JiraClient
from jiraanalyst.pipeline import generate_report
from jiraanalyst.sources import load_table, parse_pasted_text
from jiraanalyst.utils.decorators import feature_error_handler, log_entry_exit
from jiraanalyst.utils.llm import OpenAITextGenerationClient
from jiraanalyst.utils.logging import build_context, contextual_log, redact_sensitive
from jiraanalyst.utils.message_utils import info, warning
from jiraanalyst.utils.output_utils import ensure_output_dir, make_output_filename, render_report, write_report
from jiraanalyst.utils.progress_utils import spinner
from jiraanalyst.utils.rich_prompt import rich_panel


def load_raw_table(params, loader, interactive=False):
    """
    Resolve the raw table for the requested source.
    params['source'] is one of 'file', 'paste' or 'jira'.
    """
    source = params.get('source')
    if source == 'file':
        if not params.get('path'):
            raise SourceError("No input file given.")
        return load_table(params['path'], sheet_name=params.get('sheet'))
    if source == 'paste':
        text = params.get('text')
        if text is None:
            text = sys.stdin.read()
        return parse_pasted_text(text)
    if source == 'jira':
        if not params.get('project_key'):
            raise SourceError("No Jira project key given.")
        jira = JiraClient(loader.get_jira_config(interactive=interactive))
        with spinner(f"Fetching issues for project {params['project_key']}..."):
            table = jira.fetch_issue_table(params['project_key'], language=params.get('language'))
        if len(table) < 2:
            raise NoUsableDataError(f"No issues were returned for project {params['project_key']}. {NO_USABLE_DATA}")
        return table
    raise SourceError(f"Unknown input source: {source!r}")


@log_entry_exit
@feature_error_handler('jira_report')
def jira_report(params: dict, loader, interactive: bool = False):
    """
    Generate and write a report.
    Args:
        params (dict): source, path/text/project_key, focus, language, output_dir, output_format.
        loader (ConfigLoader): Configuration loader.
        interactive (bool): Prompt for missing credentials instead of failing.
    Returns:
        str: Path of the written report.
    """
    context = build_context("jira_report", source=params.get('source'))
    safe_params = redact_sensitive({k: v for k, v in params.items() if k != 'text'})
    contextual_log('info', f"[jira_report] Starting with params: {safe_params}", operation="feature_start", params=safe_params, extra=context)
    raw_table = load_raw_table(params, loader, interactive=interactive)
    client = OpenAITextGenerationClient(loader.get_openai_config(interactive=interactive))
    language = params['language']
    with spinner("Generating AI report..."):
        report = generate_report(raw_table, client, focus=params.get('focus'), language=language, timeout=client.timeout, source=params.get('source'))
    output_format = params.get('output_format', 'md')
    content = render_report(report, output_format, language)
    if params.get('print'):
        rich_panel(render_report(report, 'txt', language), title="Report", style="summary")
    output_dir = params.get('output_dir', 'output')
    ensure_output_dir(output_dir)
    filename = make_output_filename(
        "jira_report",
        [("project", params.get('project_key')), ("focus", params.get('focus'))],
        output_dir,
        ext=output_format,
    )
    write_report(filename, content, context, item_name='Jira report')
    if report.issue_breakdown:
        info(f"Report covers {len(report.issue_breakdown)} issues.", extra=context)
    else:
        warning("The AI service returned no valid issue records; the report only contains the summary.", extra=context, feature="jira_report")
    contextual_log('info', "[jira_report] Feature completed successfully.", operation="feature_end", status="success", output_file=filename, extra=context)
    return filename
