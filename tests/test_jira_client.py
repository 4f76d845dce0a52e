from unittest.mock import Mock

import pytest
import requests

from jiraanalyst.constants import JIRA_TABLE_HEADER
from jiraanalyst.errors import SourceError, TransportFailure
from jiraanalyst.jira_client import JiraClient, to_date_string

CONFIG = {
    "url": "https://jira.example.com/",
    "email": "analyst@example.com",
    "api_token": "secret",
    "api_version": 2,
    "timeout": 15,
    "max_results": 100,
}


def make_response(status=200, payload=None, text=""):
    response = Mock()
    response.status_code = status
    response.ok = status < 400
    response.text = text
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


def make_client(response=None, side_effect=None):
    session = Mock()
    if side_effect is not None:
        session.request.side_effect = side_effect
    else:
        session.request.return_value = response
    return JiraClient(CONFIG, session=session), session


def test_search_request_shape():
    client, session = make_client(make_response(payload={"issues": []}))
    client.search_issues('project = "PROJ"')
    args, kwargs = session.request.call_args
    assert args == ("POST", "https://jira.example.com/rest/api/2/search")
    assert kwargs["json"]["maxResults"] == 100
    assert kwargs["json"]["startAt"] == 0
    assert kwargs["timeout"] == 15
    assert kwargs["auth"] == ("analyst@example.com", "secret")


def test_fetch_issue_table_shapes_rows():
    payload = {"issues": [
        {"key": "PROJ-2", "fields": {
            "summary": "Payment timeout",
            "assignee": {"displayName": "Jane"},
            "status": {"name": "In Progress"},
            "created": "2025-05-02T10:11:12.000+0900",
            "resolutiondate": None,
        }},
        {"key": "PROJ-1", "fields": {"summary": "Login bug", "assignee": None, "status": None, "created": "2025-05-01T08:00:00.000+0000", "resolutiondate": "2025-05-03T09:00:00.000+0000"}},
    ]}
    client, session = make_client(make_response(payload=payload))
    rows = client.fetch_issue_table("proj")
    assert rows[0] == JIRA_TABLE_HEADER
    assert rows[1] == ["PROJ-2", "Payment timeout", "Jane", "In Progress", "2025-05-02", ""]
    assert rows[2] == ["PROJ-1", "Login bug", "Unassigned", "No status", "2025-05-01", "2025-05-03"]
    assert 'project = "PROJ" ORDER BY created DESC' == session.request.call_args[1]["json"]["jql"]


def test_fetch_issue_table_korean_placeholders():
    payload = {"issues": [{"key": "PROJ-1", "fields": {"summary": "x"}}]}
    client, _ = make_client(make_response(payload=payload))
    rows = client.fetch_issue_table("PROJ", language="ko")
    assert rows[1][2] == "담당자 없음"
    assert rows[1][3] == "상태 없음"


def test_empty_project_returns_header_only():
    client, _ = make_client(make_response(payload={"issues": []}))
    assert client.fetch_issue_table("PROJ") == [JIRA_TABLE_HEADER]


def test_invalid_project_key():
    client, session = make_client(make_response(payload={"issues": []}))
    with pytest.raises(SourceError):
        client.fetch_issue_table("bad key!")
    session.request.assert_not_called()


@pytest.mark.parametrize("status,kind", [(401, "auth"), (403, "auth"), (404, "not_found"), (400, "bad_request"), (500, "http")])
def test_status_codes_map_to_kind(status, kind):
    client, _ = make_client(make_response(status=status, text="nope"))
    with pytest.raises(TransportFailure) as excinfo:
        client.search_issues("project = X")
    assert excinfo.value.kind == kind
    assert excinfo.value.status_code == status


@pytest.mark.parametrize("exc,kind", [
    (requests.exceptions.Timeout("slow"), "timeout"),
    (requests.exceptions.ConnectionError("refused"), "connection"),
])
def test_network_errors_map_to_kind(exc, kind):
    client, _ = make_client(side_effect=exc)
    with pytest.raises(TransportFailure) as excinfo:
        client.test_connection()
    assert excinfo.value.kind == kind


def test_non_json_response():
    client, _ = make_client(make_response(payload=ValueError("no json")))
    with pytest.raises(TransportFailure) as excinfo:
        client.test_connection()
    assert excinfo.value.kind == "invalid_response"


def test_missing_issues_key():
    client, _ = make_client(make_response(payload={"errorMessages": []}))
    with pytest.raises(TransportFailure) as excinfo:
        client.search_issues("project = X")
    assert excinfo.value.kind == "invalid_response"


def test_to_date_string():
    assert to_date_string(None) == ""
    assert to_date_string("2025-05-02T10:11:12.000+0900") == "2025-05-02"
    assert to_date_string("someday") == "someday"
