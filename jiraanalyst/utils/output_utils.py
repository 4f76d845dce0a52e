"""
Output and reporting utilities.
Handles report rendering (Markdown, plain text, JSON), report writing and output file naming.
"""
import os
import re
import json
from datetime import datetime
from jiraanalyst.constants import DEFAULT_LANGUAGE, FAILED_TO, WRITTEN_TO, labels_for
from jiraanalyst.utils.rich_prompt import rich_error, rich_success
from jiraanalyst.utils.logging import contextual_log


def status_emoji(status: str) -> str:
    """
    Map a Jira status string to an emoji for visual reporting.
    """
    s = status.lower() if status else ''
    if s in ['done', 'closed', 'resolved', '완료', '해결됨']:
        return '✅'
    elif s in ['in progress', 'in review', 'doing', '진행 중']:
        return '🟡'
    elif s in ['blocked', 'on hold', 'overdue']:
        return '🔴'
    return '⬜️'


def render_plain_text_report(report, language=DEFAULT_LANGUAGE) -> str:
    """Plain-text layout meant for pasting into mail or chat."""
    labels = labels_for(language)
    text = f"{labels['title']}\n\n"
    if report.focus:
        text += f"[{labels['focus']}] {report.focus}\n\n"
    text += f"[{labels['summary']}]\n{report.summary}\n\n"
    text += f"[{labels['actions']}]\n- " + "\n- ".join(report.priority_actions) + "\n\n"
    text += f"[{labels['breakdown']}]\n"
    for issue in report.issue_breakdown:
        text += "------------------------------------\n"
        text += f"{labels['issue_key']}: {issue.issue_key}\n"
        text += f"{labels['issue_summary']}: {issue.summary}\n"
        text += f"{labels['status']}: {issue.status}\n"
        text += f"{labels['assignee']}: {issue.assignee}\n"
        if issue.created_date:
            text += f"{labels['created']}: {issue.created_date}\n"
        if issue.resolved_date:
            text += f"{labels['resolved']}: {issue.resolved_date}\n"
        text += f"{labels['recommendation']}: {issue.recommendation}\n"
    return text


def _md_cell(value) -> str:
    return str(value or '').replace('|', '\\|').replace('\n', ' ')


def render_markdown_report(report, language=DEFAULT_LANGUAGE) -> str:
    labels = labels_for(language)
    lines = [f"# {labels['title']}", ""]
    meta = []
    if report.generated_at:
        meta.append(f"> **{labels['generated_at']}:** `{report.generated_at}`")
    if report.focus:
        meta.append(f"> **{labels['focus']}:** _{report.focus}_")
    if meta:
        lines += ["  \n".join(meta), ""]
    lines += ["---", "", f"## {labels['summary']}", "", report.summary, "", f"## {labels['actions']}", ""]
    lines += [f"{index}. {action}" for index, action in enumerate(report.priority_actions, 1)]
    show_dates = any(issue.created_date or issue.resolved_date for issue in report.issue_breakdown)
    header = [labels['issue_key'], labels['issue_summary'], labels['status'], labels['assignee']]
    if show_dates:
        header += [labels['created'], labels['resolved']]
    header.append(labels['recommendation'])
    lines += ["", f"## {labels['breakdown']}", "", "| " + " | ".join(header) + " |", "|" + "---|" * len(header)]
    for issue in report.issue_breakdown:
        cells = [f"`{issue.issue_key}`", _md_cell(issue.summary), f"{status_emoji(issue.status)} {_md_cell(issue.status)}", _md_cell(issue.assignee)]
        if show_dates:
            cells += [_md_cell(issue.created_date), _md_cell(issue.resolved_date)]
        cells.append(_md_cell(issue.recommendation))
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines) + "\n"


def render_report(report, output_format='md', language=DEFAULT_LANGUAGE):
    if output_format == 'json':
        return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
    if output_format == 'txt':
        return render_plain_text_report(report, language)
    return render_markdown_report(report, language)


def write_report(filename: str, content: str, context=None, item_name='Report'):
    """
    Write a rendered report to disk, logging success or failure.
    Errors are shown, logged and re-raised.
    """
    ctx = context or {}
    try:
        with open(filename, 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        rich_error(FAILED_TO.format(action=f'write {item_name.lower()}', error=e))
        contextual_log('error', f"[output] Failed to write {item_name.lower()}: {e}", operation="output_write", output_file=filename, status="error", error_type=type(e).__name__, extra=ctx)
        raise
    rich_success(WRITTEN_TO.format(item=item_name, filename=filename))
    contextual_log('info', f"[output] {item_name} written: {filename}", operation="output_write", output_file=filename, status="success", extra=ctx)
    return filename


def ensure_output_dir(output_dir):
    os.makedirs(output_dir, exist_ok=True)


def make_output_filename(feature, params, output_dir='output', ext='md', now=None):
    """
    Build a human-readable output filename for reports.
    - feature: string, e.g. 'jira_report'
    - params: ordered list of (param_name, value) tuples; empty values are skipped
    - output_dir: directory for output files
    - ext: file extension (default 'md')
    Returns: full path to the output file
    """
    def sanitize(val):
        return re.sub(r'[^\w\-]', '', str(val).replace(' ', '_'))[:30]
    param_str = '_'.join(f"{sanitize(k)}-{sanitize(v)}" for k, v in params if v)
    date_str = (now or datetime.now()).strftime('%Y%m%d-%H%M%S')
    parts = [feature]
    if param_str:
        parts.append(param_str)
    parts.append(date_str)
    return os.path.join(output_dir, '_'.join(parts) + f'.{ext}')
