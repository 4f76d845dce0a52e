"""
Spinner utility for long-running operations (Jira fetches, text-generation calls).
"""
from contextlib import contextmanager
from jiraanalyst.utils.rich_prompt import console


@contextmanager
def spinner(message: str):
    with console.status(f"⏳ {message}", spinner="dots"):
        yield
