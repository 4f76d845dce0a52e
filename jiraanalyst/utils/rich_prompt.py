from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text
from rich.theme import Theme
from rich import box

ANALYST_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold magenta",
    "error": "bold red",
    "success": "bold green3",
    "prompt": "bold cyan",
    "banner": "bold blue",
    "summary": "bold white",
})

console = Console(theme=ANALYST_THEME)

ANALYST_ICON = "📊"


def rich_info(message):
    console.print(f"{ANALYST_ICON} [info]{message}[/info]")

def rich_warning(message):
    console.print(f"{ANALYST_ICON} [warning]{message}[/warning]")

def rich_error(message, suggestion=None):
    """
    Print an error message in a red panel, with an optional hint.
    """
    error_text = f"{message}"
    if suggestion:
        error_text += f"\nHint: {suggestion}"
    console.print(Panel(Text(error_text, style="bold red"), title="[bold red]Error![/]", border_style="red"))

def rich_success(message):
    console.print(f"{ANALYST_ICON} [success]{message}[/success]")

def rich_prompt_text(message, default=None, password=False):
    prompt_msg = f"{ANALYST_ICON} [prompt]{message}[/prompt]"
    return Prompt.ask(prompt_msg, default=default, password=password)

def rich_panel(message, title=None, style="banner"):
    console.print(Panel(message, title=title, style=style, box=box.ROUNDED))
