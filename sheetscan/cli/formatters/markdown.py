"""
Markdown formatter for documentation and sharing
"""

from typing import Any, List

from sheetscan.cli.formatters.base import BaseFormatter, row_count_label


def _markdown_cell(value: Any) -> str:
    if value is None:
        return "_NULL_"
    # Pipes would split the cell
    return str(value).replace("|", "\\|")


def _markdown_line(cells: List[str]) -> str:
    return "| " + " | ".join(cells) + " |"


class MarkdownFormatter(BaseFormatter):
    """GitHub Flavored Markdown table"""

    empty_output = "_No rows._"

    def render(
        self, columns: List[str], rows: List[List[Any]], no_color: bool, show_footer: bool
    ) -> str:
        lines = [_markdown_line(columns), _markdown_line([":---"] * len(columns))]
        lines.extend(_markdown_line([_markdown_cell(v) for v in row]) for row in rows)

        output = "\n".join(lines)
        if show_footer:
            output += f"\n\n_{row_count_label(len(rows))}_"
        return output
