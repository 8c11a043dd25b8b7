from typing import Mapping, Sequence, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

console = Console()


def rich_log(
    extracted_data: Mapping[str, object],
    title: str = "Summary",
    color: str = "cyan",
):
    """Logs key/value data in a rich-formatted panel."""
    panel_content = Text()
    for key, value in extracted_data.items():
        panel_content.append(f"{key.replace('_', ' ').capitalize()}: ", style="bold")
        panel_content.append(str(value), style="none")
        panel_content.append("\n")

    console.print(
        Panel(
            panel_content,
            title=title,
            border_style=color,
            expand=False,
        )
    )


def display_summary_table(
    title: str,
    columns: Sequence[str],
    rows: Sequence[Tuple[object, ...]],
    color: str = "cyan",
):
    """Displays rows of pipeline results as a table inside a panel."""
    table = Table(show_header=True, header_style="bold magenta", box=None)
    for i, name in enumerate(columns):
        table.add_column(name, style="bold white" if i == 0 else "bright_cyan")
    for row in rows:
        table.add_row(*(str(v) for v in row))

    console.print(
        Panel(
            table,
            title=f"📊 [bold white]{title.upper()}[/bold white] 📊",
            border_style=color,
            expand=False,
        )
    )
