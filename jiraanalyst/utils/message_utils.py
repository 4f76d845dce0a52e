"""
Message and error/info utilities for the Jira AI Analyst CLI.
Shows a message on the console and mirrors it to the structured log.
"""
from jiraanalyst.utils.rich_prompt import rich_info, rich_error, rich_warning
from jiraanalyst.utils.logging import contextual_log


def error(message, extra=None, feature=None, suggestion=None):
    rich_error(message, suggestion)
    context = dict(extra or {})
    if feature:
        context["feature"] = feature
    contextual_log('error', str(message), extra=context)

def warning(message, extra=None, feature=None):
    rich_warning(message)
    context = dict(extra or {})
    if feature:
        context["feature"] = feature
    contextual_log('warning', str(message), extra=context)

def info(message, extra=None, feature=None):
    rich_info(message)
    context = dict(extra or {})
    if feature:
        context["feature"] = feature
    contextual_log('info', str(message), extra=context)
