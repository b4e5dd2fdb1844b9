"""
SheetScan - typed, row-oriented scans over remote spreadsheet tables

This package fetches a spreadsheet table from a gviz-style JSON API and
exposes it as a single-pass scan that emits one row of typed cells at a time.
"""

__version__ = "0.1.0"

# Main API
from sheetscan.core.adapter import SheetAdapter, ScanState
from sheetscan.core.config import AdapterConfig, TableRequest
from sheetscan.core.types import Cell, DataType, OutputColumn
from sheetscan.readers.sheet_reader import SheetReader

__all__ = [
    "__version__",
    "SheetAdapter",
    "ScanState",
    "AdapterConfig",
    "TableRequest",
    "Cell",
    "DataType",
    "OutputColumn",
    "SheetReader",
]
