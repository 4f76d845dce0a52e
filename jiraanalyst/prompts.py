"""
prompts.py

Prompt construction for the two text-generation stages: the issue breakdown and the
summary/priority-action report built from it.
"""
from jiraanalyst.constants import LANGUAGE_NAMES, DEFAULT_LANGUAGE, MIN_PRIORITY_ACTIONS, MAX_PRIORITY_ACTIONS, placeholders_for


def _language_name(language):
    return LANGUAGE_NAMES.get(language, LANGUAGE_NAMES[DEFAULT_LANGUAGE])


def build_breakdown_prompt(issues_data, language=DEFAULT_LANGUAGE):
    """Build the prompt that converts the normalized table (JSON array of arrays) into issue records."""
    lang = _language_name(language)
    unassigned = placeholders_for(language)["assignee"]
    prompt = (
        "You are a machine that converts raw Jira data into a JSON object.\n"
        "Your ONLY output should be a valid JSON object with a single \"issueBreakdown\" key holding an array.\n\n"
        "CRITICAL RULES:\n"
        "1. PROCESS ONLY VALID ROWS: a row is valid ONLY IF it contains BOTH an issue key (like 'ABC-123') AND a summary value.\n"
        "2. IGNORE ALL OTHER ROWS: skip any row that is empty, incomplete, or lacks either the issue key or the summary. "
        "Never create an object for such rows.\n"
        "3. For EACH valid row, create an object with the keys: issueKey, summary, status, assignee, recommendation.\n"
        f"4. If the assignee cell is empty, use \"{unassigned}\" as the assignee.\n"
        "5. DATE EXTRACTION: look for date columns such as 'Created', 'Resolved', '생성일', '해결일'. "
        "If found, add their values as createdDate and resolvedDate. If not found, omit these keys entirely.\n"
        "6. SHORTEN CONTENT:\n"
        "   - summary: a VERY SHORT paraphrase of the original issue title, under 15 words.\n"
        f"   - recommendation: a VERY SHORT, actionable recommendation in {lang}, under 10 words.\n"
        "7. VALID JSON: the entire response MUST be a single, complete, parseable JSON object.\n\n"
        "The first row of the data is the header row.\n\n"
        "Jira Data:\n"
        f"{issues_data}\n\n"
        "Now generate the JSON object from the Jira Data, strictly following all rules."
    )
    return prompt


def build_summary_prompt(breakdown_json, current_date, analysis_point=None, language=DEFAULT_LANGUAGE):
    """Build the prompt that turns the issue breakdown into a summary and priority actions."""
    lang = _language_name(language)
    prompt = (
        f"You are a project management expert who writes reports in {lang}.\n"
        "Based on the following JSON data of Jira issues, generate a high-level summary and a list of priority actions.\n"
        f"Today's date is {current_date}.\n\n"
    )
    if analysis_point:
        prompt += (
            f"The user wants you to focus specifically on '{analysis_point}'. Pay close attention to this in the summary and priority actions.\n"
            "- For a date-based query (e.g. 'issues created in May', 'issues resolved last week'), use the createdDate and "
            "resolvedDate fields to filter your analysis and give specific numbers and trends for that period.\n"
            "- For other queries (e.g. a specific person or a keyword), filter by assignee or search the summary to focus your report.\n\n"
        )
    else:
        prompt += "Provide a general analysis. Mention any noticeable trends, risks, or bottlenecks.\n\n"
    prompt += (
        "Issue Breakdown Data (JSON):\n"
        f"{breakdown_json}\n\n"
        "Instructions:\n"
        "Your entire response MUST be a single valid JSON object with ONLY two keys: \"summary\" and \"priorityActions\".\n"
        f"Write all text in {lang}.\n"
        "1. summary (string): a high-level summary. Count the total issues and break them down by status. "
    )
    if analysis_point:
        prompt += f"Incorporate the user's analysis point '{analysis_point}' into the summary.\n"
    else:
        prompt += "Mention any noticeable trends, risks, or bottlenecks.\n"
    prompt += (
        f"2. priorityActions (array of strings): the top {MIN_PRIORITY_ACTIONS}-{MAX_PRIORITY_ACTIONS} most critical, "
        "actionable items for the team, most critical first."
    )
    if analysis_point:
        prompt += f" These actions should be heavily influenced by the analysis point '{analysis_point}'."
    prompt += "\n\nNow generate the JSON object from the Issue Breakdown Data."
    return prompt
