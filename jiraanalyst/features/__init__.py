"""
features/__init__.py

Feature manifest and registry. The CLI builds its interactive menu and dispatches
subcommands from FEATURE_MANIFEST.
"""

from .jira_report import jira_report
from .normalize_table import normalize_table
from .jira_connection import check_connection

FEATURE_MANIFEST = [
    {"key": "report", "label": "Generate AI report", "emoji": "📝", "feature_func": jira_report, "needs_source": True, "description": "Analyze issues from a file, pasted text or a Jira project and write an AI summary report."},
    {"key": "normalize", "label": "Preview normalized table", "emoji": "🔎", "feature_func": normalize_table, "needs_source": True, "description": "Show the header and issue rows that would be analyzed, without calling the AI service."},
    {"key": "test-connection", "label": "Test Jira connection", "emoji": "🔌", "feature_func": check_connection, "needs_source": False, "description": "Verify the configured Jira URL and credentials."},
]

FEATURE_REGISTRY = {f["key"]: f["feature_func"] for f in FEATURE_MANIFEST}
