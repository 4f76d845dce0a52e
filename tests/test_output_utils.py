import datetime
import json
import os

import pytest

from jiraanalyst.models import IssueRecord, Report
from jiraanalyst.utils.output_utils import (
    make_output_filename, render_markdown_report, render_plain_text_report, render_report,
    status_emoji, write_report,
)


def make_report(with_dates=False, focus=None):
    issues = (
        IssueRecord("PROJ-1", "Login | signup", status="Done", assignee="Jane", recommendation="Close",
                    created_date="2025-05-01" if with_dates else None),
        IssueRecord("PROJ-2", "Payment timeout", status="In Progress", assignee="Unassigned", recommendation="Escalate"),
    )
    return Report(
        summary="Two issues, one done.",
        priority_actions=("Escalate PROJ-2", "Retest PROJ-1", "Plan sprint"),
        issue_breakdown=issues,
        focus=focus,
        generated_at="2025-05-20T10:00:00",
    )


def test_status_emoji():
    assert status_emoji("Done") == "✅"
    assert status_emoji("In Progress") == "🟡"
    assert status_emoji("Blocked") == "🔴"
    assert status_emoji("") == "⬜️"


def test_markdown_report_without_dates():
    text = render_markdown_report(make_report())
    assert "# Jira Issue Summary Report" in text
    assert "1. Escalate PROJ-2" in text
    assert "| Issue Key | Summary | Status | Assignee | AI Recommendation |" in text
    assert "Login \\| signup" in text
    assert "Created" not in text


def test_markdown_report_with_dates_and_focus():
    text = render_markdown_report(make_report(with_dates=True, focus="Open issues"), language="ko")
    assert "생성일" in text
    assert "_Open issues_" in text
    assert "| `PROJ-2` | Payment timeout | 🟡 In Progress | Unassigned |  |  | Escalate |" in text


def test_plain_text_report():
    text = render_plain_text_report(make_report(focus="Bottlenecks"))
    assert text.startswith("Jira Issue Summary Report\n")
    assert "[Analysis Focus] Bottlenecks" in text
    assert "- Retest PROJ-1" in text
    assert "Issue Key: PROJ-2" in text


def test_json_report():
    data = json.loads(render_report(make_report(), "json"))
    assert data["priorityActions"][0] == "Escalate PROJ-2"
    assert data["issueBreakdown"][1]["assignee"] == "Unassigned"
    assert "focus" not in data


def test_make_output_filename():
    now = datetime.datetime(2025, 5, 20, 10, 11, 12)
    name = make_output_filename("jira_report", [("project", "PROJ"), ("focus", "open issues!"), ("empty", None)], "out", ext="json", now=now)
    assert name == os.path.join("out", "jira_report_project-PROJ_focus-open_issues_20250520-101112.json")


def test_write_report(tmp_path):
    target = tmp_path / "report.md"
    assert write_report(str(target), "hello") == str(target)
    assert target.read_text(encoding="utf-8") == "hello"


def test_write_report_failure_is_raised(tmp_path):
    with pytest.raises(OSError):
        write_report(str(tmp_path / "missing-dir" / "report.md"), "hello")
