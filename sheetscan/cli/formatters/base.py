"""
Base formatter interface for CLI output

Subclasses implement render(); format() takes care of the empty case and
turns every cell value into something a text format can carry.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List


def render_value(value: Any) -> Any:
    """Turn cell values that text formats cannot carry natively into strings"""
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, Decimal):
        return str(value)
    return value


def row_count_label(count: int) -> str:
    return f"{count} row{'s' if count != 1 else ''}"


class BaseFormatter:
    """Base class for all output formatters"""

    #: Output for a scan that produced no rows
    empty_output = ""

    def format(
        self, results: List[Dict[str, Any]], no_color: bool = False, show_footer: bool = True
    ) -> str:
        """
        Format scanned rows for output

        Args:
            results: List of row dictionaries, all with the same keys
            no_color: Disable terminal styling
            show_footer: Append a row count where the format has room for one

        Returns:
            Formatted string ready for output
        """
        if not results:
            return self.empty_output

        columns = list(results[0].keys())
        rows = [[render_value(row[col]) for col in columns] for row in results]
        return self.render(columns, rows, no_color=no_color, show_footer=show_footer)

    def render(
        self, columns: List[str], rows: List[List[Any]], no_color: bool, show_footer: bool
    ) -> str:
        raise NotImplementedError("Formatters must implement render() method")

    def get_name(self) -> str:
        """Get formatter name"""
        return self.__class__.__name__.replace("Formatter", "").lower()
