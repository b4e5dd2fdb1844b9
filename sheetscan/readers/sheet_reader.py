"""
Sheet Reader - row dictionaries from a remote spreadsheet table

Wraps a SheetAdapter so a whole scan can be consumed with a for loop.
Every read runs a fresh scan: the table is fetched again, nothing is cached.
"""

from typing import Any, Dict, Iterator, List, Mapping, Optional

from sheetscan.core.adapter import SheetAdapter
from sheetscan.core.types import OutputColumn, Schema
from sheetscan.readers.base import BaseReader


class SheetReader(BaseReader):
    """
    Read a remote spreadsheet table

    Example:
        reader = SheetReader({"object": "1AbC...", "sheet": "Sales"})
        for row in reader:
            print(row)
    """

    def __init__(
        self,
        table_options: Mapping[str, str],
        server_options: Optional[Mapping[str, str]] = None,
        columns: Optional[List[OutputColumn]] = None,
    ):
        """
        Initialize sheet reader

        Args:
            table_options: Table options (``object`` required, ``sheet``/``gid`` optional)
            server_options: Server options (``base_url``, ``envelope``, ``projection``, ...)
            columns: Output columns; if omitted, every column of the table in source order
        """
        self.table_options = dict(table_options)
        self.columns = columns
        self.adapter = SheetAdapter()
        self.adapter.init(server_options)

    def read_lazy(self) -> Iterator[Dict[str, Any]]:
        """Run one scan and yield ``{column name: cell value}`` per row"""
        self.adapter.begin_scan(self.table_options)
        try:
            columns = self.columns
            if columns is None:
                columns = self.adapter.get_schema().to_columns()
            names = [column.name for column in columns]

            while True:
                cells = self.adapter.iter_scan(columns)
                if cells is None:
                    break
                yield {name: cell.value for name, cell in zip(names, cells)}
        finally:
            self.adapter.end_scan()

    def get_schema(self) -> Optional[Schema]:
        """
        Schema of the output rows

        Built from the explicit columns when given; otherwise the table is
        fetched to read its column metadata.
        """
        if self.columns is not None:
            return Schema({column.name: column.declared_type for column in self.columns})

        self.adapter.begin_scan(self.table_options)
        try:
            return self.adapter.get_schema()
        finally:
            self.adapter.end_scan()
