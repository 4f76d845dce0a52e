"""
extractor.py

First text-generation stage: turns the normalized table into issue records.
The service does the reading; this module enforces the contract on what comes back.
"""
import asyncio
from typing import List

from marshmallow import ValidationError

from jiraanalyst.constants import DEFAULT_LANGUAGE, EXTRACTION_FAILED, ISSUE_KEY_FULL_RE, LLM_TIMEOUT
from jiraanalyst.errors import ExtractionFailure, TextGenerationError
from jiraanalyst.models import IssueRecord
from jiraanalyst.prompts import build_breakdown_prompt
from jiraanalyst.schemas import BreakdownSchema, IssueBreakdownItemSchema
from jiraanalyst.utils.logging import contextual_log


def record_from_item(item):
    """
    Build an IssueRecord from one validated breakdown item, or None when the item stands for
    an invalid row (no well-formed issue key, or no summary).
    """
    issue_key = (item.get("issueKey") or "").strip()
    summary = (item.get("summary") or "").strip()
    if not issue_key or not ISSUE_KEY_FULL_RE.match(issue_key) or not summary:
        return None
    return IssueRecord(
        issue_key=issue_key,
        summary=summary,
        status=(item.get("status") or "").strip(),
        assignee=(item.get("assignee") or "").strip(),
        recommendation=(item.get("recommendation") or "").strip(),
        created_date=item.get("createdDate"),
        resolved_date=item.get("resolvedDate"),
    )


class IssueExtractor:
    """
    Args:
        client (TextGenerationClient): Text-generation service.
        language (str): Language for the recommendation text.
        timeout (float): Seconds to wait for the service before failing.
    """
    def __init__(self, client, language=DEFAULT_LANGUAGE, timeout=LLM_TIMEOUT):
        self.client = client
        self.language = language
        self.timeout = timeout
        self.item_schema = IssueBreakdownItemSchema()

    async def extract(self, table_text, context=None) -> List[IssueRecord]:
        context = context or {}
        prompt = build_breakdown_prompt(table_text, self.language)
        try:
            output = await asyncio.wait_for(self.client.generate(prompt, BreakdownSchema()), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ExtractionFailure(f"{EXTRACTION_FAILED} The service did not answer within {self.timeout:g}s.") from e
        except TextGenerationError as e:
            raise ExtractionFailure(f"{EXTRACTION_FAILED} {e}") from e
        items = output.get("issueBreakdown") if output else None
        if items is None:
            raise ExtractionFailure(EXTRACTION_FAILED)
        records = []
        dropped = 0
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise ExtractionFailure(f"{EXTRACTION_FAILED} Item {index} is not an object.")
            try:
                loaded = self.item_schema.load(item)
            except ValidationError as err:
                raise ExtractionFailure(f"{EXTRACTION_FAILED} Item {index} is malformed: {err.messages}") from err
            record = record_from_item(loaded)
            if record is None:
                dropped += 1
                continue
            records.append(record)
        if dropped:
            contextual_log('debug', f"[extractor] Dropped {dropped} records without issue key or summary.", extra=context, operation="extract")
        contextual_log('info', f"[extractor] Extracted {len(records)} issue records.", extra=context, operation="extract", status="success", issue_count=len(records))
        return records
