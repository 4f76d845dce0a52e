import asyncio

import pytest

from conftest import FakeTextGenerationClient, breakdown_item
from jiraanalyst.errors import ExtractionFailure, TextGenerationError
from jiraanalyst.extractor import IssueExtractor, record_from_item

TABLE_JSON = '[["Key", "Summary"], ["PROJ-1", "Fix login bug"]]'


def run_extract(client, **kwargs):
    return asyncio.run(IssueExtractor(client, **kwargs).extract(TABLE_JSON))


def test_single_record():
    client = FakeTextGenerationClient({"issueBreakdown": [breakdown_item("PROJ-1", "Fix login bug", createdDate="2025-05-01")]})
    records = run_extract(client)
    assert len(records) == 1
    assert records[0].issue_key == "PROJ-1"
    assert records[0].created_date == "2025-05-01"
    assert records[0].resolved_date is None
    assert TABLE_JSON in client.prompts[0]


def test_invalid_records_are_dropped():
    client = FakeTextGenerationClient({"issueBreakdown": [
        breakdown_item("PROJ-1", "Keep me"),
        breakdown_item("", "No key"),
        breakdown_item("not a key", "Bad key"),
        breakdown_item("PROJ-2", "   "),
        {"summary": "key missing entirely"},
    ]})
    records = run_extract(client)
    assert [r.issue_key for r in records] == ["PROJ-1"]


def test_blank_dates_become_absent():
    client = FakeTextGenerationClient({"issueBreakdown": [breakdown_item("PROJ-1", "x", createdDate=" ", resolvedDate=None)]})
    record = run_extract(client)[0]
    assert record.created_date is None
    assert record.resolved_date is None


def test_missing_collection_fails():
    client = FakeTextGenerationClient({"issues": []})
    with pytest.raises(ExtractionFailure):
        run_extract(client)


def test_non_json_response_fails():
    client = FakeTextGenerationClient("Sorry, I cannot help with that.")
    with pytest.raises(ExtractionFailure):
        run_extract(client)


def test_non_object_item_fails():
    client = FakeTextGenerationClient({"issueBreakdown": ["PROJ-1"]})
    with pytest.raises(ExtractionFailure):
        run_extract(client)


def test_mistyped_item_fails():
    client = FakeTextGenerationClient({"issueBreakdown": [breakdown_item("PROJ-1", "x", status=["Open"])]})
    with pytest.raises(ExtractionFailure):
        run_extract(client)


def test_service_error_fails():
    client = FakeTextGenerationClient(TextGenerationError("rate limited"))
    with pytest.raises(ExtractionFailure, match="rate limited"):
        run_extract(client)


def test_timeout_fails():
    client = FakeTextGenerationClient({"issueBreakdown": []}, delay=0.5)
    with pytest.raises(ExtractionFailure, match="did not answer"):
        run_extract(client, timeout=0.05)


def test_korean_prompt_asks_for_korean_recommendations():
    client = FakeTextGenerationClient({"issueBreakdown": []})
    run_extract(client, language="ko")
    assert "KOREAN" in client.prompts[0]


def test_record_from_item_strips_whitespace():
    record = record_from_item({"issueKey": " PROJ-7 ", "summary": " Crash ", "status": None})
    assert record.issue_key == "PROJ-7"
    assert record.summary == "Crash"
    assert record.status == ""
