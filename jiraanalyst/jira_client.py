import datetime
import logging

import requests
from marshmallow import ValidationError
from requests.adapters import HTTPAdapter, Retry

from jiraanalyst.constants import (
    JIRA_MAX_RESULTS, JIRA_SEARCH_FIELDS, JIRA_TABLE_HEADER, JIRA_TIMEOUT,
    DEFAULT_LANGUAGE, placeholders_for,
)
from jiraanalyst.errors import SourceError, TransportFailure
from jiraanalyst.utils.fields import ProjectKeyField
from jiraanalyst.utils.logging import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


def to_date_string(value):
    """Reduce a Jira timestamp ('2025-05-02T10:11:12.000+0900') to 'YYYY-MM-DD'. Empty stays empty."""
    if not value:
        return ""
    text = str(value)
    try:
        return datetime.datetime.strptime(text[:10], "%Y-%m-%d").date().isoformat()
    except ValueError:
        return text


class JiraClient:
    """
    Fetches issue data from the Jira REST API with basic auth, retry on server errors and a
    request timeout. Transport problems are translated to TransportFailure with a kind the
    caller can show to the user.

    Args:
        config (dict): Validated Jira config (url, email, api_token, api_version, timeout, max_results).
        session (requests.Session, optional): Pre-built session, mainly for tests.
    """
    def __init__(self, config, session=None, max_retries=3):
        self.base_url = config['url'].rstrip('/')
        self.auth = (config['email'], config['api_token'])
        self.api_version = config.get('api_version', 2)
        self.timeout = config.get('timeout', JIRA_TIMEOUT)
        self.max_results = config.get('max_results', JIRA_MAX_RESULTS)
        self.headers = {
            "Accept": "application/json",
            "Content-Type": "application/json"
        }
        if session is None:
            session = requests.Session()
            retries = Retry(
                total=max_retries,
                backoff_factor=0.5,
                status_forcelist=[500, 502, 503, 504],
                allowed_methods=["GET"]
            )
            session.mount('https://', HTTPAdapter(max_retries=retries))
            session.mount('http://', HTTPAdapter(max_retries=retries))
        self.session = session

    def _url(self, endpoint):
        return f"{self.base_url}/rest/api/{self.api_version}/{endpoint.lstrip('/')}"

    def _request(self, method, endpoint, **kwargs):
        url = self._url(endpoint)
        try:
            response = self.session.request(method, url, headers=self.headers, auth=self.auth, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.error(f"[JiraClient] Timeout after {self.timeout}s: {method} {url}")
            raise TransportFailure(
                f"Connection to the Jira server ({self.base_url}) timed out after {self.timeout:g}s. "
                "The server is not responding or the network (including VPN) is very slow.",
                kind="timeout",
            ) from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"[JiraClient] Connection error: {method} {url}: {e}")
            raise TransportFailure(
                f"Network error: cannot connect to the Jira server ({self.base_url}). "
                "Check that the URL is correct and reachable from this network (VPN).",
                kind="connection",
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"[JiraClient] Request failed: {method} {url}: {e}")
            raise TransportFailure(f"Jira request failed: {e}", kind="connection") from e
        if not response.ok:
            self._raise_for_status(response)
        try:
            return response.json()
        except ValueError as e:
            raise TransportFailure("The Jira server returned a response that is not JSON.", kind="invalid_response", status_code=response.status_code) from e

    def _raise_for_status(self, response):
        status = response.status_code
        logger.error(f"[JiraClient] Jira API error response (status {status}): {response.text[:1000]}")
        message = f"Jira API request failed (status code: {status}).\n"
        if status in (401, 403):
            kind = "auth"
            message += "Authentication failed. Check the configured Jira email and API token, and that the account can access the project."
        elif status == 404:
            kind = "not_found"
            message += "Not found. The Jira URL may be missing a context path (e.g. '/jira'), the server may be unreachable without VPN, or the API path does not exist on this server."
        elif status == 400:
            kind = "bad_request"
            message += "The request was rejected. Check that the project key exists and the query is valid."
        else:
            kind = "http"
            message += "Check the project key or whether the Jira server has another problem."
        raise TransportFailure(message, kind=kind, status_code=status)

    def get(self, endpoint, params=None):
        return self._request("GET", endpoint, params=params)

    def post(self, endpoint, json=None):
        return self._request("POST", endpoint, json=json)

    def search_issues(self, jql, fields=None, max_results=None):
        """
        Search Jira issues using JQL.
        :param jql: Jira Query Language string
        :param fields: List of fields to return
        :param max_results: Maximum number of issues to return (defaults to the configured cap)
        :return: List of issues
        """
        logger.info(f"[JiraClient] JQL sent: {jql}")
        payload = {
            'jql': jql,
            'startAt': 0,
            'maxResults': max_results or self.max_results,
            'fields': list(fields or JIRA_SEARCH_FIELDS),
        }
        data = self.post('search', json=payload)
        if not isinstance(data, dict) or 'issues' not in data:
            raise TransportFailure(
                "No issues were returned by the Jira server. Check that the project key is correct and the account can access the project.",
                kind="invalid_response",
            )
        return data['issues'] or []

    def fetch_issue_table(self, project_key, language=DEFAULT_LANGUAGE):
        """
        Fetch the most recent issues of a project as a table: header row plus one row per issue.
        Returns only the header when the project has no issues.
        """
        try:
            project_key = ProjectKeyField().deserialize(project_key)
        except ValidationError as err:
            raise SourceError(f"Invalid Jira project key {project_key!r}: {err.messages[0]}") from err
        jql = f'project = "{project_key}" ORDER BY created DESC'
        issues = self.search_issues(jql, fields=JIRA_SEARCH_FIELDS)
        placeholders = placeholders_for(language)
        rows = [list(JIRA_TABLE_HEADER)]
        for issue in issues:
            fields = issue.get('fields') or {}
            assignee = fields.get('assignee') or {}
            status = fields.get('status') or {}
            rows.append([
                issue.get('key', ''),
                fields.get('summary') or '',
                assignee.get('displayName') or placeholders['assignee'],
                status.get('name') or placeholders['status'],
                to_date_string(fields.get('created')),
                to_date_string(fields.get('resolutiondate')),
            ])
        logger.info(f"[JiraClient] Fetched {len(rows) - 1} issues for project {project_key}.")
        return rows

    def test_connection(self):
        """
        Get the current user (myself endpoint); raises TransportFailure when the connection or credentials fail.
        """
        return self.get('myself')
