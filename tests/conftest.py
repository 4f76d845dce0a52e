import asyncio
import json

import pytest

from jiraanalyst.utils.llm import TextGenerationClient, parse_json_response


class FakeTextGenerationClient(TextGenerationClient):
    """
    Answers each generate() call with the next queued response. A dict is serialized and run
    through the same parsing/validation as a real service reply; an exception is raised as-is.
    """

    def __init__(self, *responses, delay=0):
        self.responses = list(responses)
        self.delay = delay
        self.prompts = []
        self.timeout = 20

    async def generate(self, prompt, schema):
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.responses:
            raise AssertionError("unexpected text-generation call")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        text = response if isinstance(response, str) else json.dumps(response)
        return parse_json_response(text, schema)

    @property
    def call_count(self):
        return len(self.prompts)


def breakdown_item(key, summary, status="In Progress", assignee="Kim", recommendation="Follow up", **extra):
    item = {
        "issueKey": key,
        "summary": summary,
        "status": status,
        "assignee": assignee,
        "recommendation": recommendation,
    }
    item.update(extra)
    return item


SUMMARY_RESPONSE = {
    "summary": "Three issues in total, one done and two in progress.",
    "priorityActions": [
        "Unblock PROJ-2",
        "Review PROJ-3 with the team",
        "Close out PROJ-1 documentation",
    ],
}


@pytest.fixture()
def raw_table():
    return [
        ["Sprint 12 export", None, None],
        [],
        ["Issue Key", "Summary", "Status"],
        ["PROJ-1", "Login page fails on Safari", "Done"],
        ["PROJ-2", "Payment timeout", "In Progress"],
        ["notes: reviewed by QA", "", ""],
        ["PROJ-3", "Search is slow", "In Progress"],
    ]


@pytest.fixture()
def fake_client_factory():
    def factory(*responses, **kwargs):
        return FakeTextGenerationClient(*responses, **kwargs)
    return factory
