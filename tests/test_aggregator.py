import asyncio
import datetime

import pytest

from conftest import SUMMARY_RESPONSE, FakeTextGenerationClient
from jiraanalyst.aggregator import ReportAggregator, normalize_focus
from jiraanalyst.errors import AggregationFailure
from jiraanalyst.models import IssueRecord

RECORDS = [
    IssueRecord("PROJ-1", "Login page fails", status="Done", created_date="2025-05-01", resolved_date="2025-05-03"),
    IssueRecord("PROJ-2", "Payment timeout", status="In Progress"),
]


def run_aggregate(client, **kwargs):
    return asyncio.run(ReportAggregator(client).aggregate(RECORDS, **kwargs))


def test_summary_and_actions():
    client = FakeTextGenerationClient(SUMMARY_RESPONSE)
    result = run_aggregate(client, current_date=datetime.date(2025, 5, 20))
    assert result.summary == SUMMARY_RESPONSE["summary"]
    assert list(result.priority_actions) == SUMMARY_RESPONSE["priorityActions"]
    prompt = client.prompts[0]
    assert "2025-05-20" in prompt
    assert '"issueKey": "PROJ-1"' in prompt
    assert '"resolvedDate": "2025-05-03"' in prompt
    assert "general analysis" in prompt


def test_focus_reaches_prompt():
    client = FakeTextGenerationClient(SUMMARY_RESPONSE)
    run_aggregate(client, focus="  Issues resolved in May ")
    assert "'Issues resolved in May'" in client.prompts[0]


def test_blank_focus_means_general():
    assert normalize_focus("   ") is None
    assert normalize_focus(None) is None
    assert normalize_focus(" x ") == "x"


@pytest.mark.parametrize("count", [2, 6])
def test_action_count_out_of_range_fails(count):
    response = {"summary": "s", "priorityActions": [f"action {n}" for n in range(count)]}
    with pytest.raises(AggregationFailure):
        run_aggregate(FakeTextGenerationClient(response))


@pytest.mark.parametrize("count", [3, 5])
def test_action_count_bounds_accepted(count):
    response = {"summary": "s", "priorityActions": [f"action {n}" for n in range(count)]}
    assert len(run_aggregate(FakeTextGenerationClient(response)).priority_actions) == count


def test_missing_summary_fails():
    with pytest.raises(AggregationFailure):
        run_aggregate(FakeTextGenerationClient({"priorityActions": ["a", "b", "c"]}))


def test_blank_summary_fails():
    with pytest.raises(AggregationFailure):
        run_aggregate(FakeTextGenerationClient({"summary": "  ", "priorityActions": ["a", "b", "c"]}))


def test_timeout_fails():
    client = FakeTextGenerationClient(SUMMARY_RESPONSE, delay=0.5)
    with pytest.raises(AggregationFailure):
        asyncio.run(ReportAggregator(client, timeout=0.05).aggregate(RECORDS))
