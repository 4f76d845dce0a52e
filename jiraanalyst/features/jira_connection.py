"""
jira_connection.py

Checks the configured Jira credentials against the 'myself' endpoint.
"""
from jiraanalyst.jira_client import JiraClient
from jiraanalyst.utils.decorators import feature_error_handler
from jiraanalyst.utils.progress_utils import spinner
from jiraanalyst.utils.rich_prompt import rich_success


@feature_error_handler('check_connection')
def check_connection(params: dict, loader, interactive: bool = False):
    jira = JiraClient(loader.get_jira_config(interactive=interactive))
    with spinner(f"Connecting to {jira.base_url}..."):
        user = jira.test_connection()
    name = user.get('displayName') or user.get('name') or user.get('emailAddress') or 'unknown user'
    rich_success(f"Connected to {jira.base_url} as {name}.")
    return user
