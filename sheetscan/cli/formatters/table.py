"""
Rich table formatter for terminal output
"""

from typing import Any, List

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sheetscan.cli.formatters.base import BaseFormatter, row_count_label


class TableFormatter(BaseFormatter):
    """Rich table, truncated to fit the terminal"""

    empty_output = "No rows."

    def render(
        self, columns: List[str], rows: List[List[Any]], no_color: bool, show_footer: bool
    ) -> str:
        console = Console(force_terminal=not no_color)

        # Narrow terminal or many columns: aggressive truncation
        narrow = console.width < 80 or len(columns) > 8
        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE if narrow else box.HEAVY_HEAD,
        )
        for col in columns:
            table.add_column(
                col, style="cyan", overflow="ellipsis", max_width=15 if narrow else 30, no_wrap=narrow
            )

        for row in rows:
            table.add_row(*("[dim]NULL[/dim]" if v is None else escape(str(v)) for v in row))

        with console.capture() as capture:
            console.print(table)
            if show_footer:
                console.print(f"[dim]{row_count_label(len(rows))}[/dim]")

        return capture.get()
