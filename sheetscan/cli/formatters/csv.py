"""
CSV formatter for Unix-friendly output
"""

import csv
import io
from typing import Any, List

from sheetscan.cli.formatters.base import BaseFormatter


class CSVFormatter(BaseFormatter):
    """Header line plus one record per row; NULL cells become empty fields"""

    def render(
        self, columns: List[str], rows: List[List[Any]], no_color: bool, show_footer: bool
    ) -> str:
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(columns)
        writer.writerows(rows)
        return output.getvalue()
