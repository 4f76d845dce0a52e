"""
Shared constants: the issue-key pattern, display caps and per-language placeholder and message text.
"""
import re

ISSUE_KEY_PATTERN = r'[A-Z][A-Z0-9_]+-\d+'
ISSUE_KEY_RE = re.compile(ISSUE_KEY_PATTERN)
ISSUE_KEY_FULL_RE = re.compile(r'^' + ISSUE_KEY_PATTERN + r'$')
PROJECT_KEY_RE = re.compile(r'^[A-Z][A-Z0-9_]+$')

SUMMARY_DISPLAY_CAP = 50
ELLIPSIS = "..."

MIN_PRIORITY_ACTIONS = 3
MAX_PRIORITY_ACTIONS = 5

JIRA_MAX_RESULTS = 100
JIRA_TIMEOUT = 15
LLM_TIMEOUT = 20

JIRA_TABLE_HEADER = ["Issue Key", "Summary", "Assignee", "Status", "Created", "Resolved"]
JIRA_SEARCH_FIELDS = ["summary", "status", "assignee", "created", "resolutiondate"]

SUPPORTED_LANGUAGES = ("en", "ko")
DEFAULT_LANGUAGE = "en"

PLACEHOLDERS = {
    "en": {
        "recommendation": "No recommendation",
        "assignee": "Unassigned",
        "status": "No status",
    },
    "ko": {
        "recommendation": "추천 없음",
        "assignee": "담당자 없음",
        "status": "상태 없음",
    },
}

LANGUAGE_NAMES = {
    "en": "ENGLISH",
    "ko": "KOREAN",
}

REPORT_LABELS = {
    "en": {
        "title": "Jira Issue Summary Report",
        "summary": "Overall Summary",
        "actions": "Priority Actions",
        "breakdown": "Issue Breakdown",
        "issue_key": "Issue Key",
        "issue_summary": "Summary",
        "status": "Status",
        "assignee": "Assignee",
        "created": "Created",
        "resolved": "Resolved",
        "recommendation": "AI Recommendation",
        "focus": "Analysis Focus",
        "generated_at": "Generated",
    },
    "ko": {
        "title": "Jira 이슈 요약 리포트",
        "summary": "전체 요약",
        "actions": "주요 조치 항목",
        "breakdown": "개별 이슈 상세",
        "issue_key": "이슈 키",
        "issue_summary": "요약",
        "status": "상태",
        "assignee": "담당자",
        "created": "생성일",
        "resolved": "해결일",
        "recommendation": "AI 추천",
        "focus": "분석 관점",
        "generated_at": "생성 시각",
    },
}

NO_USABLE_DATA = "No rows with a Jira issue key (e.g. PROJ-123) were found in the input."
EXTRACTION_FAILED = "The AI service failed to produce the issue breakdown."
AGGREGATION_FAILED = "The AI service failed to produce the summary and priority actions."
WRITTEN_TO = "{item} written to {filename}"
FAILED_TO = "Failed to {action}: {error}"


def placeholders_for(language):
    return PLACEHOLDERS.get(language, PLACEHOLDERS[DEFAULT_LANGUAGE])


def labels_for(language):
    return REPORT_LABELS.get(language, REPORT_LABELS[DEFAULT_LANGUAGE])
