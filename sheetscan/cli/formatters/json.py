"""
JSON formatter for machine-readable output
"""

import json
from typing import Any, List

from sheetscan.cli.formatters.base import BaseFormatter


class JSONFormatter(BaseFormatter):
    """
    Array of row objects

    NUMERIC and TIMESTAMP cells are written as strings so no precision
    is lost; JSON cells stay as their serialized text.
    """

    empty_output = "[]"

    def render(
        self, columns: List[str], rows: List[List[Any]], no_color: bool, show_footer: bool
    ) -> str:
        return json.dumps([dict(zip(columns, row)) for row in rows], indent=2, ensure_ascii=False)
