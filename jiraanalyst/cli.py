"""
cli.py

Jira AI Analyst CLI entrypoint.

Subcommands:
- report           Generate an AI summary report from a file, pasted text (stdin) or a Jira project.
- normalize        Preview the header and issue rows that would be analyzed (no AI call).
- test-connection  Check the configured Jira credentials.

Run without a subcommand for an interactive menu.
"""
import argparse
import sys

import questionary

from jiraanalyst import __version__
from jiraanalyst.cli_logging_setup import setup_logging
from jiraanalyst.config import ConfigLoader
from jiraanalyst.constants import SUPPORTED_LANGUAGES
from jiraanalyst.errors import ConfigError, JiraAnalystError
from jiraanalyst.features import FEATURE_MANIFEST, FEATURE_REGISTRY
from jiraanalyst.utils.logging import contextual_log
from jiraanalyst.utils.message_utils import error
from jiraanalyst.utils.rich_prompt import rich_panel

FOCUS_EXAMPLES = [
    "Issues resolved in May",
    "Progress by assignee",
    "Issues related to 'defect'",
    "Issues created last week",
    "Priority 'High' issues",
    "Open issues",
    "Main bottlenecks",
    "Assignees with the most issues",
]


def add_source_arguments(parser):
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--file', '-f', dest='path', help='Spreadsheet (.xlsx/.xlsm) or text table (.csv/.tsv/.txt)')
    group.add_argument('--paste', action='store_true', help='Read a tab-separated table pasted on stdin')
    group.add_argument('--jira-project', '-p', dest='project_key', help='Fetch the 100 newest issues of this Jira project')
    parser.add_argument('--sheet', help='Worksheet name (spreadsheets only; defaults to the active sheet)')
    parser.add_argument('--language', choices=SUPPORTED_LANGUAGES, help='Report language')


def build_parser():
    parser = argparse.ArgumentParser(prog='jira-analyst', description="Summarize Jira issues with AI.")
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--config', default='config.yaml', help='Path to the YAML config file')
    parser.add_argument('--log-level', help='Log level (overrides JIRAANALYST_LOG_LEVEL)')
    subparsers = parser.add_subparsers(dest='command')

    report = subparsers.add_parser('report', help='Generate an AI summary report')
    add_source_arguments(report)
    report.add_argument('--focus', help="Optional analysis focus, e.g. 'issues resolved last week'")
    report.add_argument('--format', dest='output_format', choices=['md', 'json', 'txt'], help='Output format')
    report.add_argument('--output-dir', help='Directory for the report file')
    report.add_argument('--print', action='store_true', help='Also print the report to the console')

    normalize = subparsers.add_parser('normalize', help='Preview the rows that would be analyzed')
    add_source_arguments(normalize)
    normalize.add_argument('--json', action='store_true', help='Print the table as JSON')

    subparsers.add_parser('test-connection', help='Check the Jira connection')
    return parser


def params_from_args(args, report_options):
    params = {
        'language': getattr(args, 'language', None) or report_options['language'],
        'output_dir': getattr(args, 'output_dir', None) or report_options['output_dir'],
        'output_format': getattr(args, 'output_format', None) or report_options['output_format'],
        'focus': getattr(args, 'focus', None),
        'print': getattr(args, 'print', False),
        'json': getattr(args, 'json', False),
        'sheet': getattr(args, 'sheet', None),
    }
    if getattr(args, 'path', None):
        params.update(source='file', path=args.path)
    elif getattr(args, 'paste', False):
        params.update(source='paste')
    elif getattr(args, 'project_key', None):
        params.update(source='jira', project_key=args.project_key)
    return params


def prompt_source(params):
    """
    Ask for the input source interactively. Returns False when the user aborts.
    """
    choice = questionary.select(
        "Where should the issue data come from?",
        choices=["Spreadsheet / text file", "Jira project", "Paste a table", "Abort"],
    ).ask()
    if choice in (None, "Abort"):
        return False
    if choice == "Spreadsheet / text file":
        path = questionary.path("File path:").ask()
        if not path:
            return False
        params.update(source='file', path=path)
    elif choice == "Jira project":
        key = questionary.text("Jira project key (e.g. PROJ):").ask()
        if not key:
            return False
        params.update(source='jira', project_key=key)
    else:
        text = questionary.text("Paste the table, then press Esc+Enter:", multiline=True).ask()
        if text is None:
            return False
        params.update(source='paste', text=text)
    return True


def prompt_focus(params):
    focus = questionary.autocomplete(
        "Analysis focus (optional, Enter for a general analysis):",
        choices=FOCUS_EXAMPLES,
    ).ask()
    params['focus'] = focus or None


def interactive_menu(loader, report_options):
    rich_panel(f"Jira AI Analyst v{__version__}\nAnalyze Jira issues and get an AI summary report.", title="📊 Jira AI Analyst")
    choices = [f"{f['emoji']} {f['label']}" for f in FEATURE_MANIFEST] + ["Exit"]
    while True:
        picked = questionary.select("What would you like to do?", choices=choices).ask()
        if picked in (None, "Exit"):
            return 0
        feature = FEATURE_MANIFEST[choices.index(picked)]
        params = params_from_args(argparse.Namespace(), report_options)
        if feature["needs_source"] and not prompt_source(params):
            continue
        if feature["key"] == "report":
            prompt_focus(params)
        try:
            feature["feature_func"](params, loader, interactive=True)
        except JiraAnalystError:
            continue


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)
    try:
        loader = ConfigLoader(args.config)
        report_options = loader.get_report_options()
    except ConfigError as e:
        error(str(e), feature="cli")
        return 2
    try:
        if not args.command:
            return interactive_menu(loader, report_options)
        params = params_from_args(args, report_options)
        if args.command in ('report', 'normalize') and not params.get('source'):
            if not sys.stdin.isatty():
                parser.error(f"{args.command}: one of --file, --paste or --jira-project is required")
            if not prompt_source(params):
                return 0
            if args.command == 'report' and params.get('focus') is None:
                prompt_focus(params)
        contextual_log('info', f"[cli] Running '{args.command}'.", feature="cli", operation="dispatch")
        FEATURE_REGISTRY[args.command](params, loader)
    except JiraAnalystError:
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == '__main__':
    sys.exit(main())
