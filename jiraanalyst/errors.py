"""
errors.py

Typed failures raised by the report pipeline and its collaborators. Every error carries a
human-readable message suitable for showing to the user as-is.
"""


class JiraAnalystError(Exception):
    """Base class for all errors raised by jiraanalyst."""


class ConfigError(JiraAnalystError):
    """Missing or invalid configuration."""

    def __init__(self, message, messages=None):
        super().__init__(message)
        self.messages = messages or {}


class SourceError(JiraAnalystError):
    """A spreadsheet, pasted text or uploaded file could not be turned into rows."""


class TextGenerationError(JiraAnalystError):
    """The text-generation service could not be reached or returned no usable output."""


class SchemaError(TextGenerationError):
    """Text-generation output could not be parsed or did not match the expected schema."""

    def __init__(self, message, messages=None, raw=None):
        super().__init__(message)
        self.messages = messages or {}
        self.raw = raw


class ReportGenerationError(JiraAnalystError):
    """A report request failed. No partial report is ever returned alongside it."""

    stage = None


class NoUsableDataError(ReportGenerationError):
    """The input contains no row with an issue key."""

    stage = "normalizing"


class ExtractionFailure(ReportGenerationError):
    """The issue breakdown could not be produced."""

    stage = "extracting"


class AggregationFailure(ReportGenerationError):
    """The summary and priority actions could not be produced."""

    stage = "aggregating"


class TransportFailure(JiraAnalystError):
    """
    A live Jira request failed.
    kind is one of: timeout, connection, auth, not_found, bad_request, http, invalid_response.
    """

    def __init__(self, message, kind="http", status_code=None):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
