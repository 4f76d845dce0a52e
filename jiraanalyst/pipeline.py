"""
pipeline.py

One-shot report generation: normalize -> extract -> aggregate -> assemble.

Each request owns its own intermediate data. Any stage failure moves the pipeline to FAILED
and raises a ReportGenerationError subclass; there are no retries and no partial reports.
"""
import asyncio
import datetime
import enum
import time
import uuid

from jiraanalyst.aggregator import ReportAggregator, normalize_focus
from jiraanalyst.assembler import assemble
from jiraanalyst.constants import DEFAULT_LANGUAGE, LLM_TIMEOUT, NO_USABLE_DATA
from jiraanalyst.errors import NoUsableDataError, ReportGenerationError
from jiraanalyst.extractor import IssueExtractor
from jiraanalyst.normalizer import normalize
from jiraanalyst.utils.logging import build_context, contextual_log


class PipelineState(enum.Enum):
    IDLE = "idle"
    NORMALIZING = "normalizing"
    EXTRACTING = "extracting"
    AGGREGATING = "aggregating"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"


class ReportPipeline:
    """
    Args:
        client (TextGenerationClient): Service used by both text-generation stages.
        language (str): Report language ('en' or 'ko'); also selects placeholder text.
        timeout (float): Per-call timeout for each text-generation stage, in seconds.

    A pipeline instance handles a single request; build a new one per report.
    """
    def __init__(self, client, language=DEFAULT_LANGUAGE, timeout=LLM_TIMEOUT, source=None):
        self.language = language
        self.extractor = IssueExtractor(client, language=language, timeout=timeout)
        self.aggregator = ReportAggregator(client, language=language, timeout=timeout)
        self.state = PipelineState.IDLE
        self.history = [PipelineState.IDLE]
        self._stage_started = time.monotonic()
        self.context = build_context("jira_report", source=source, request_id=str(uuid.uuid4()))

    def _transition(self, state):
        now = time.monotonic()
        if self.state is not PipelineState.IDLE:
            contextual_log('debug', f"[pipeline] Stage {self.state.value} finished.", extra=self.context, operation="pipeline_stage", stage=self.state.value, duration_ms=int((now - self._stage_started) * 1000))
        self._stage_started = now
        self.state = state
        self.history.append(state)

    async def generate(self, raw_table, focus=None, current_date=None):
        if self.state is not PipelineState.IDLE:
            raise RuntimeError("ReportPipeline instances are single-use; create a new one per request.")
        focus = normalize_focus(focus)
        started = time.monotonic()
        contextual_log('info', f"[pipeline] Report requested ({len(raw_table or ())} raw rows, focus: {focus or 'general'}).", extra=self.context, operation="pipeline_start")
        try:
            self._transition(PipelineState.NORMALIZING)
            table = normalize(raw_table)
            if table is None or len(table) < 2:
                raise NoUsableDataError(NO_USABLE_DATA)

            self._transition(PipelineState.EXTRACTING)
            records = await self.extractor.extract(table.to_json(), context=self.context)

            self._transition(PipelineState.AGGREGATING)
            aggregate = await self.aggregator.aggregate(records, focus=focus, current_date=current_date, context=self.context)

            self._transition(PipelineState.ASSEMBLING)
            generated_at = datetime.datetime.now().isoformat(timespec='seconds')
            report = assemble(records, aggregate, focus=focus, language=self.language, generated_at=generated_at)
        except ReportGenerationError as e:
            failed_stage = self.state.value
            self._transition(PipelineState.FAILED)
            contextual_log('error', f"[pipeline] {type(e).__name__} while {failed_stage}: {e}", extra=self.context, operation="pipeline_end", stage=failed_stage, status="error", error_type=type(e).__name__, duration_ms=int((time.monotonic() - started) * 1000))
            raise
        except BaseException as e:
            failed_stage = self.state.value
            self._transition(PipelineState.FAILED)
            contextual_log('error', f"[pipeline] Unexpected {type(e).__name__} while {failed_stage}: {e}", exc_info=True, extra=self.context, operation="pipeline_end", stage=failed_stage, status="error", error_type=type(e).__name__)
            raise
        self._transition(PipelineState.DONE)
        contextual_log('info', f"[pipeline] Report ready with {len(report.issue_breakdown)} issues.", extra=self.context, operation="pipeline_end", status="success", issue_count=len(report.issue_breakdown), duration_ms=int((time.monotonic() - started) * 1000))
        return report


def generate_report(raw_table, client, focus=None, language=DEFAULT_LANGUAGE, timeout=LLM_TIMEOUT, source=None):
    """Synchronous entry point: build a pipeline and run one request to completion."""
    pipeline = ReportPipeline(client, language=language, timeout=timeout, source=source)
    return asyncio.run(pipeline.generate(raw_table, focus=focus))
