"""
assembler.py

Merges the issue records and the aggregate summary into the final Report. Pure and
deterministic: no service calls, no records dropped.
"""
from jiraanalyst.constants import DEFAULT_LANGUAGE, ELLIPSIS, SUMMARY_DISPLAY_CAP, placeholders_for
from jiraanalyst.models import Report


def truncate_summary(summary, cap=SUMMARY_DISPLAY_CAP):
    """Cut summaries longer than cap characters to cap characters plus an ellipsis."""
    summary = summary or ""
    if len(summary) > cap:
        return summary[:cap] + ELLIPSIS
    return summary


def apply_defaults(record, placeholders=None):
    """Fill empty recommendation, assignee and status with placeholder text. Idempotent."""
    placeholders = placeholders or placeholders_for(DEFAULT_LANGUAGE)
    changes = {}
    for name in ("recommendation", "assignee", "status"):
        value = getattr(record, name)
        if value is None or not str(value).strip():
            changes[name] = placeholders[name]
    return record.with_changes(**changes) if changes else record


def prepare_record(record, placeholders=None):
    record = apply_defaults(record, placeholders)
    return record.with_changes(summary=truncate_summary(record.summary))


def assemble(records, aggregate, focus=None, language=DEFAULT_LANGUAGE, generated_at=None):
    """Build the Report. Output depends only on the arguments; the caller supplies the timestamp."""
    placeholders = placeholders_for(language)
    breakdown = tuple(prepare_record(record, placeholders) for record in records)
    return Report(
        summary=aggregate.summary,
        priority_actions=tuple(aggregate.priority_actions),
        issue_breakdown=breakdown,
        focus=focus,
        generated_at=generated_at,
    )
