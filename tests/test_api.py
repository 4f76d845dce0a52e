import io

import pytest

from conftest import SUMMARY_RESPONSE, FakeTextGenerationClient, breakdown_item
from jiraanalyst.api import create_app
from jiraanalyst.config import ConfigLoader
from jiraanalyst.errors import TransportFailure

BREAKDOWN = {"issueBreakdown": [breakdown_item("PROJ-1", "Fix login bug", assignee="")]}
ROWS = [["Key", "Summary"], ["PROJ-1", "Fix login bug"]]


class StubJira:
    def __init__(self, rows=None, error=None):
        self.rows = rows
        self.error = error
        self.calls = []

    def fetch_issue_table(self, project_key, language="en"):
        self.calls.append((project_key, language))
        if self.error:
            raise self.error
        return self.rows


@pytest.fixture()
def make_app(tmp_path):
    def factory(*responses, jira=None, environ=None):
        client = FakeTextGenerationClient(*responses)
        loader = ConfigLoader(str(tmp_path / "missing.yaml"), environ=environ or {})
        app = create_app(loader=loader, client_factory=lambda: client, jira_factory=lambda: jira)
        app.testing = True
        return app.test_client(), client
    return factory


def test_health(make_app):
    http, _ = make_app()
    response = http.get("/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_report_from_rows(make_app):
    http, client = make_app(BREAKDOWN, SUMMARY_RESPONSE)
    response = http.post("/report", json={"rows": ROWS, "focus": "Open issues"})
    assert response.status_code == 200
    data = response.get_json()
    assert data["focus"] == "Open issues"
    assert data["issueBreakdown"][0]["assignee"] == "Unassigned"
    assert data["priorityActions"] == SUMMARY_RESPONSE["priorityActions"]
    assert client.call_count == 2


def test_report_language_from_config(make_app):
    http, _ = make_app(BREAKDOWN, SUMMARY_RESPONSE, environ={"JIRAANALYST_LANGUAGE": "ko"})
    data = http.post("/report", json={"rows": ROWS}).get_json()
    assert data["issueBreakdown"][0]["assignee"] == "담당자 없음"


def test_report_without_usable_rows(make_app):
    http, client = make_app()
    response = http.post("/report", json={"rows": [["Name", "Age"], ["", ""]]})
    assert response.status_code == 422
    assert response.get_json()["error"] == "NoUsableDataError"
    assert client.call_count == 0


def test_extraction_failure_is_bad_gateway(make_app):
    http, _ = make_app({"nothing": []})
    response = http.post("/report", json={"rows": ROWS})
    assert response.status_code == 502
    assert response.get_json()["error"] == "ExtractionFailure"


@pytest.mark.parametrize("body", [{}, {"rows": ROWS, "projectKey": "PROJ"}, {"rows": "PROJ-1"}, {"rows": ROWS, "language": "fr"}, {"projectKey": ""}, {"projectKey": "bad key!"}])
def test_invalid_request_body(make_app, body):
    http, _ = make_app()
    response = http.post("/report", json=body)
    assert response.status_code == 400
    assert response.get_json()["error"] == "ValidationError"


def test_report_from_jira_project(make_app):
    jira = StubJira(rows=ROWS)
    http, _ = make_app(BREAKDOWN, SUMMARY_RESPONSE, jira=jira)
    response = http.post("/report", json={"projectKey": "PROJ", "language": "ko"})
    assert response.status_code == 200
    assert jira.calls == [("PROJ", "ko")]


def test_project_key_is_uppercased(make_app):
    jira = StubJira(rows=ROWS)
    http, _ = make_app(BREAKDOWN, SUMMARY_RESPONSE, jira=jira)
    assert http.post("/report", json={"projectKey": " proj "}).status_code == 200
    assert jira.calls == [("PROJ", "en")]


def test_jira_transport_failure(make_app):
    jira = StubJira(error=TransportFailure("timed out", kind="timeout"))
    http, _ = make_app(jira=jira)
    response = http.post("/report", json={"projectKey": "PROJ"})
    assert response.status_code == 504
    assert response.get_json()["kind"] == "timeout"


def test_report_from_uploaded_file(make_app):
    http, _ = make_app(BREAKDOWN, SUMMARY_RESPONSE)
    upload = (io.BytesIO(b"Key\tSummary\nPROJ-1\tFix login bug\n"), "export.tsv")
    response = http.post("/report", data={"file": upload, "focus": "Bugs"}, content_type="multipart/form-data")
    assert response.status_code == 200
    assert response.get_json()["focus"] == "Bugs"


def test_unsupported_upload(make_app):
    http, _ = make_app()
    upload = (io.BytesIO(b"%PDF"), "export.pdf")
    response = http.post("/report", data={"file": upload}, content_type="multipart/form-data")
    assert response.status_code == 400
    assert response.get_json()["error"] == "SourceError"
