"""
aggregator.py

Second text-generation stage: summary and prioritized actions from the issue records,
optionally narrowed by a free-text analysis focus.
"""
import asyncio
import datetime
import json

from jiraanalyst.constants import AGGREGATION_FAILED, DEFAULT_LANGUAGE, LLM_TIMEOUT
from jiraanalyst.errors import AggregationFailure, TextGenerationError
from jiraanalyst.models import AggregateResult
from jiraanalyst.prompts import build_summary_prompt
from jiraanalyst.schemas import SummaryAndActionsSchema
from jiraanalyst.utils.logging import contextual_log


def normalize_focus(focus):
    """Blank focus text means a general analysis."""
    if focus is None:
        return None
    focus = str(focus).strip()
    return focus or None


def serialize_records(records):
    return json.dumps([record.to_dict() for record in records], ensure_ascii=False)


class ReportAggregator:
    def __init__(self, client, language=DEFAULT_LANGUAGE, timeout=LLM_TIMEOUT):
        self.client = client
        self.language = language
        self.timeout = timeout

    async def aggregate(self, records, focus=None, current_date=None, context=None) -> AggregateResult:
        context = context or {}
        focus = normalize_focus(focus)
        current_date = current_date or datetime.date.today()
        if isinstance(current_date, datetime.date):
            current_date = current_date.isoformat()
        prompt = build_summary_prompt(serialize_records(records), current_date, focus, self.language)
        try:
            output = await asyncio.wait_for(self.client.generate(prompt, SummaryAndActionsSchema()), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise AggregationFailure(f"{AGGREGATION_FAILED} The service did not answer within {self.timeout:g}s.") from e
        except TextGenerationError as e:
            raise AggregationFailure(f"{AGGREGATION_FAILED} {e}") from e
        if not output or "summary" not in output or "priorityActions" not in output:
            raise AggregationFailure(AGGREGATION_FAILED)
        result = AggregateResult(
            summary=output["summary"].strip(),
            priority_actions=tuple(action.strip() for action in output["priorityActions"]),
        )
        contextual_log('info', f"[aggregator] Summary with {len(result.priority_actions)} priority actions (focus: {focus or 'general'}).", extra=context, operation="aggregate", status="success")
        return result
