"""
Base reader interface

Readers present a data source as an iterator of row dictionaries, the
shape the CLI formatters and DataFrame export consume.
"""

from typing import Any, Dict, Iterator, Optional

from sheetscan.core.types import Schema


class BaseReader:
    """
    Base class for data source readers

    Readers are responsible for:
    1. Reading data from a source
    2. Yielding rows as dictionaries

    The capability checks below exist so a consumer can ask before it tries
    to push work down. Remote spreadsheet tables support none of them: the
    full table is always materialized.
    """

    def read_lazy(self) -> Iterator[Dict[str, Any]]:
        """
        Yield rows as dictionaries

        Yields:
            Dictionary representing one row of data

        Example:
            {'name': 'Alice', 'age': 30, 'city': 'NYC'}
        """
        raise NotImplementedError("Subclasses must implement read_lazy()")

    def supports_pushdown(self) -> bool:
        """Can WHERE conditions be evaluated by the source?"""
        return False

    def supports_column_selection(self) -> bool:
        """Can the source skip columns that are not needed?"""
        return False

    def supports_limit(self) -> bool:
        """Can the source stop early for a LIMIT?"""
        return False

    def get_schema(self) -> Optional[Schema]:
        """
        Get schema information (column names and types)

        Returns:
            Schema object, or None if the schema is not known
        """
        return None

    def __iter__(self):
        """Allow readers to be used directly in for loops"""
        return self.read_lazy()

    def to_dataframe(self):
        """
        Convert reader content to pandas DataFrame

        Returns:
            pandas.DataFrame containing all data
        """
        try:
            import pandas as pd
        except ImportError:
            raise ImportError(
                "Pandas is required for to_dataframe(). Install `sheetscan[pandas]`"
            )

        return pd.DataFrame(list(self.read_lazy()))
