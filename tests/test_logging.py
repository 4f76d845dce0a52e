import json
import logging

from jiraanalyst.cli_logging_setup import setup_logging
from jiraanalyst.utils.logging import LOGGER_NAME, build_context, contextual_log, redact_sensitive


def test_redact_sensitive_is_recursive():
    redacted = redact_sensitive({"api_token": "x", "nested": {"OPENAI_API_KEY": "y", "url": "z"}, "Authorization": "Basic"})
    assert redacted["api_token"] == "***REDACTED***"
    assert redacted["nested"]["OPENAI_API_KEY"] == "***REDACTED***"
    assert redacted["nested"]["url"] == "z"
    assert redacted["Authorization"] == "***REDACTED***"


def test_build_context():
    assert build_context("jira_report", source="file", request_id="abc", extra_field=1) == {
        "feature": "jira_report", "source": "file", "correlation_id": "abc", "extra_field": 1,
    }


def test_json_log_lines(tmp_path):
    log_file = tmp_path / "logs" / "analyst.log"
    logger = setup_logging(log_file=str(log_file), level="debug", fmt="json")
    handler_count = len(logger.handlers)
    assert setup_logging(log_file=str(log_file)) is logger
    assert len(logger.handlers) == handler_count
    try:
        contextual_log("info", "stage done", extra=build_context("jira_report"), operation="extract", issue_count=3)
        for handler in logger.handlers:
            handler.flush()
        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        record = json.loads(line)
        assert record["message"] == "stage done"
        assert record["feature"] == "jira_report"
        assert record["operation"] == "extract"
        assert record["issue_count"] == 3
        assert record["levelname"] == "INFO"
        assert record["operation_id"]
    finally:
        for handler in list(logger.handlers):
            if getattr(handler, "baseFilename", "").startswith(str(tmp_path)):
                logger.removeHandler(handler)
                handler.close()
        logger.setLevel(logging.NOTSET)
    assert logging.getLogger(LOGGER_NAME) is logger
