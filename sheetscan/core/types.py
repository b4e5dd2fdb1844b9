"""Type system for SheetScan.

This module provides declared column types, typed cells, timestamp parsing,
and schema inference from the remote table's column metadata.
"""

import json
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class DataType(Enum):
    """Column types a host can declare, and the kinds a Cell can carry."""

    BOOL = "BOOL"
    I64 = "I64"
    STRING = "STRING"
    NUMERIC = "NUMERIC"
    TIMESTAMP = "TIMESTAMP"
    JSON = "JSON"

    # Cell kind only
    NULL = "NULL"

    # Host types without a coercion rule
    FLOAT = "FLOAT"
    DATE = "DATE"
    TIME = "TIME"
    BINARY = "BINARY"

    def __str__(self) -> str:
        return self.value

    def is_projectable(self) -> bool:
        """Check if values can be coerced to this type."""
        return self in PROJECTABLE_TYPES

    @classmethod
    def from_name(cls, name: str) -> "DataType":
        """Resolve a host type spelling such as ``bigint`` or ``jsonb``.

        Raises:
            ValueError: If the name is not a known type
        """
        key = name.strip().lower()
        if key in _TYPE_ALIASES:
            return _TYPE_ALIASES[key]
        try:
            return cls(key.upper())
        except ValueError:
            raise ValueError(f"Unknown column type: {name}") from None


PROJECTABLE_TYPES = frozenset(
    {
        DataType.BOOL,
        DataType.I64,
        DataType.STRING,
        DataType.NUMERIC,
        DataType.TIMESTAMP,
        DataType.JSON,
    }
)

_TYPE_ALIASES = {
    "bool": DataType.BOOL,
    "boolean": DataType.BOOL,
    "i64": DataType.I64,
    "int8": DataType.I64,
    "bigint": DataType.I64,
    "int": DataType.I64,
    "integer": DataType.I64,
    "string": DataType.STRING,
    "text": DataType.STRING,
    "varchar": DataType.STRING,
    "numeric": DataType.NUMERIC,
    "decimal": DataType.NUMERIC,
    "timestamp": DataType.TIMESTAMP,
    "timestamptz": DataType.TIMESTAMP,
    "datetime": DataType.TIMESTAMP,
    "json": DataType.JSON,
    "jsonb": DataType.JSON,
    "float": DataType.FLOAT,
    "float8": DataType.FLOAT,
    "double": DataType.FLOAT,
    "real": DataType.FLOAT,
    "date": DataType.DATE,
    "time": DataType.TIME,
    "bytea": DataType.BINARY,
    "binary": DataType.BINARY,
}


@dataclass(frozen=True)
class Cell:
    """One typed output value.

    ``kind`` tags the value: NULL -> None, BOOL -> bool, I64 -> int,
    STRING -> str, NUMERIC -> Decimal, TIMESTAMP -> datetime, JSON -> str.
    """

    kind: DataType
    value: Any = None

    @classmethod
    def null(cls) -> "Cell":
        return cls(DataType.NULL, None)

    @property
    def is_null(self) -> bool:
        return self.kind == DataType.NULL

    def __repr__(self) -> str:
        if self.is_null:
            return "Cell(NULL)"
        return f"Cell({self.kind}, {self.value!r})"


@dataclass(frozen=True)
class OutputColumn:
    """A column requested by the host for one scan."""

    name: str
    declared_type: DataType
    positional_index: int

    def __repr__(self) -> str:
        return f"{self.name}: {self.declared_type} @{self.positional_index}"


_GVIZ_DATE_RE = re.compile(r"^Date\(\s*(\d+(?:\s*,\s*\d+){2,6})\s*\)$")


def parse_gviz_date(value: str) -> datetime | None:
    """Parse the ``Date(2024,0,15,10,30,0)`` literal used by the gviz API.

    Months are 0-based; the optional seventh field is milliseconds.
    """
    match = _GVIZ_DATE_RE.match(value.strip())
    if not match:
        return None

    parts = [int(p) for p in match.group(1).split(",")]
    year, month, day = parts[0], parts[1] + 1, parts[2]
    hour, minute, second, millis = (parts[3:] + [0, 0, 0, 0])[:4]
    try:
        return datetime(year, month, day, hour, minute, second, millis * 1000)
    except ValueError:
        return None


def parse_datetime(value: str) -> datetime | None:
    """Try to parse datetime from string using multiple formats.

    Args:
        value: String to parse

    Returns:
        datetime object if successful, None otherwise
    """
    if not isinstance(value, str):
        return None

    value = value.strip()

    gviz = parse_gviz_date(value)
    if gviz is not None:
        return gviz

    formats = [
        "%Y-%m-%dT%H:%M:%S",  # ISO 8601: 2024-01-15T10:30:00
        "%Y-%m-%dT%H:%M:%S.%f",  # ISO with microseconds
        "%Y-%m-%dT%H:%M:%S%z",  # ISO with offset: 2024-01-15T10:30:00+02:00
        "%Y-%m-%d %H:%M:%S",  # SQL format: 2024-01-15 10:30:00
        "%Y-%m-%d %H:%M:%S.%f",  # SQL with microseconds
        "%d/%m/%Y %H:%M:%S",  # EU format: 15/01/2024 10:30:00
        "%m/%d/%Y %H:%M:%S",  # US format: 01/15/2024 10:30:00
        "%Y-%m-%d %H:%M",  # Without seconds
        "%d/%m/%Y %H:%M",  # EU without seconds
        "%m/%d/%Y %H:%M",  # US without seconds
    ]

    # %z does not accept a bare Z before Python 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"

    for fmt in formats:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    return None


def parse_date(value: str) -> date | None:
    """Try to parse date from string using multiple formats.

    Args:
        value: String to parse

    Returns:
        date object if successful, None otherwise
    """
    if not isinstance(value, str):
        return None

    value = value.strip()

    formats = [
        "%Y-%m-%d",  # ISO: 2024-01-15
        "%d/%m/%Y",  # EU: 15/01/2024
        "%m/%d/%Y",  # US: 01/15/2024
        "%Y%m%d",  # Compact: 20240115
    ]

    for fmt in formats:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    return None


def parse_timestamp(value: str) -> datetime | None:
    """Parse a calendar timestamp literal; date-only literals map to midnight."""
    dt = parse_datetime(value)
    if dt is not None:
        return dt

    d = parse_date(value)
    if d is not None:
        return datetime(d.year, d.month, d.day)

    return None


def is_json_string(value: str) -> bool:
    """Check if a string contains valid JSON (object or array).

    Args:
        value: String to check

    Returns:
        True if valid JSON object/array, False otherwise
    """
    if not isinstance(value, str):
        return False

    value = value.strip()

    # Must start with { or [
    if not (value.startswith("{") or value.startswith("[")):
        return False

    try:
        parsed = json.loads(value)
        return isinstance(parsed, (dict, list))
    except (json.JSONDecodeError, ValueError):
        return False


# gviz column types -> declared types
GVIZ_TYPES = {
    "string": DataType.STRING,
    "number": DataType.NUMERIC,
    "boolean": DataType.BOOL,
    "date": DataType.TIMESTAMP,
    "datetime": DataType.TIMESTAMP,
    "timeofday": DataType.JSON,
}


class Schema:
    """Schema definition for a remote table.

    Holds column names and their corresponding data types, in source order.
    """

    def __init__(self, columns: dict[str, DataType]):
        """Initialize schema.

        Args:
            columns: Dictionary mapping column names to data types
        """
        self.columns = columns

    def __len__(self) -> int:
        """Get number of columns."""
        return len(self.columns)

    def __repr__(self) -> str:
        cols = ", ".join(f"{name}: {dtype}" for name, dtype in self.columns.items())
        return f"Schema({cols})"

    def get_column_names(self) -> list[str]:
        """Get list of column names."""
        return list(self.columns.keys())

    def to_columns(self) -> list[OutputColumn]:
        """Build output columns in source order."""
        return [
            OutputColumn(name, dtype, index)
            for index, (name, dtype) in enumerate(self.columns.items())
        ]

    @staticmethod
    def from_gviz_cols(cols: list[dict[str, Any]]) -> "Schema":
        """Infer schema from the ``table.cols`` metadata of a gviz response.

        Columns are named by label, falling back to the column id (A, B, ...).
        Duplicate names get a numeric suffix.

        Args:
            cols: List of column descriptors like ``{"id": "A", "label": "name", "type": "string"}``

        Returns:
            Inferred Schema
        """
        columns: dict[str, DataType] = {}
        for index, col in enumerate(cols):
            name = (col.get("label") or "").strip() or col.get("id") or f"col{index}"
            base, suffix = name, 2
            while name in columns:
                name = f"{base}_{suffix}"
                suffix += 1
            columns[name] = GVIZ_TYPES.get(col.get("type", ""), DataType.STRING)
        return Schema(columns)

    def to_dict(self) -> dict[str, Any]:
        """Convert schema to dictionary."""
        return {name: dtype.value for name, dtype in self.columns.items()}
