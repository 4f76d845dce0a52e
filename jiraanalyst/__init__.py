"""
Jira AI Analyst: turns Jira issue data (spreadsheet, pasted table or live Jira query) into an
AI-generated status report.
"""
__version__ = "2.0.0"
