"""
Row projector - turns one source row into typed output cells

Each requested output column is located in the row's ``c[index].v`` value
array and coerced to the column's declared type. Two switches change the
contract and are never mixed silently:

- projection strategy: positional index from the host vs. request order
- coercion mode: typed cells with hard errors vs. every value as text
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List

from sheetscan.core.config import CoercionMode, NumericFallback, ProjectionStrategy
from sheetscan.core.errors import (
    ColumnNotFoundError,
    MalformedNumericError,
    MalformedTimestampError,
    UnsupportedTypeError,
)
from sheetscan.core.types import Cell, DataType, OutputColumn, is_json_string, parse_timestamp

logger = logging.getLogger(__name__)

_MISSING = object()

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


def _to_json_text(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class RowProjector:
    """
    Project source rows onto output columns

    Example:
        projector = RowProjector()
        cells = projector.project(
            {"c": [{"v": "120000"}, {"v": 3}]},
            [OutputColumn("salary", DataType.I64, 0), OutputColumn("level", DataType.I64, 1)],
        )
        # [Cell(I64, 120000), Cell(I64, 3)]
    """

    def __init__(
        self,
        projection: ProjectionStrategy = ProjectionStrategy.POSITIONAL,
        coercion: CoercionMode = CoercionMode.TYPED,
        numeric_fallback: NumericFallback = NumericFallback.ZERO,
    ):
        self.projection = projection
        self.coercion = coercion
        self.numeric_fallback = numeric_fallback

        self._coercers: Dict[DataType, Callable[[Any, OutputColumn], Cell]] = {
            DataType.BOOL: self._coerce_bool,
            DataType.I64: self._coerce_i64,
            DataType.STRING: self._coerce_string,
            DataType.NUMERIC: self._coerce_numeric,
            DataType.TIMESTAMP: self._coerce_timestamp,
            DataType.JSON: self._coerce_json,
        }

    def project(self, row: Dict[str, Any], columns: List[OutputColumn]) -> List[Cell]:
        """
        Build one output row

        Args:
            row: Source row object (``{"c": [{"v": ...}, ...]}``)
            columns: Output columns in host order

        Returns:
            One Cell per column, in the same order as ``columns``

        Raises:
            ColumnNotFoundError: If the row has no value at a column's position
            UnsupportedTypeError: If a declared type has no coercion rule (typed mode)
            MalformedTimestampError: If a timestamp value cannot be parsed (typed mode)
            MalformedNumericError: If a numeric value cannot be parsed and the
                numeric fallback is ``error`` (typed mode)
        """
        cells = []
        for sequence, column in enumerate(columns):
            if self.projection == ProjectionStrategy.POSITIONAL:
                index = column.positional_index
            else:
                index = sequence
            cells.append(self.coerce(self.source_value(row, index, column), column))
        return cells

    def source_value(self, row: Dict[str, Any], index: int, column: OutputColumn) -> Any:
        """Look up ``row.c[index].v``; a null cell placeholder reads as None"""
        values = row.get("c") if isinstance(row, dict) else None
        value: Any = _MISSING
        if isinstance(values, list) and 0 <= index < len(values):
            entry = values[index]
            if entry is None:
                value = None
            elif isinstance(entry, dict):
                value = entry.get("v", _MISSING)

        if value is _MISSING:
            msg = f"Source column '{column.name}' not found"
            logger.error(msg)
            raise ColumnNotFoundError(msg, column=column.name)
        return value

    def coerce(self, value: Any, column: OutputColumn) -> Cell:
        """Convert one source value to a cell of the column's declared type"""
        if self.coercion == CoercionMode.TEXT:
            if value is None:
                return Cell.null()
            if isinstance(value, str):
                return Cell(DataType.STRING, value)
            return Cell(DataType.STRING, _to_json_text(value))

        if not column.declared_type.is_projectable():
            msg = f"Unsupported type {column.declared_type} for column '{column.name}'"
            logger.error(msg)
            raise UnsupportedTypeError(msg, column=column.name)

        if value is None:
            return Cell.null()
        return self._coercers[column.declared_type](value, column)

    def _coerce_bool(self, value: Any, column: OutputColumn) -> Cell:
        if isinstance(value, bool):
            return Cell(DataType.BOOL, value)
        return Cell.null()

    def _coerce_i64(self, value: Any, column: OutputColumn) -> Cell:
        # Truncates toward zero; numeric strings go through Decimal to keep precision
        if _is_number(value):
            number = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        elif isinstance(value, str):
            try:
                number = Decimal(value.strip())
            except InvalidOperation:
                return Cell.null()
        else:
            return Cell.null()

        if not number.is_finite():
            return Cell.null()
        # adjusted() bounds the magnitude without expanding the digits
        if number.adjusted() > 18 or not I64_MIN <= int(number) <= I64_MAX:
            logger.error("Value %r for column '%s' is out of I64 range", value, column.name)
            return Cell.null()
        return Cell(DataType.I64, int(number))

    def _coerce_string(self, value: Any, column: OutputColumn) -> Cell:
        if isinstance(value, str):
            return Cell(DataType.STRING, value)
        return Cell.null()

    def _coerce_numeric(self, value: Any, column: OutputColumn) -> Cell:
        number = None
        if _is_number(value):
            number = Decimal(str(value))
        elif isinstance(value, str):
            try:
                number = Decimal(value.strip())
            except InvalidOperation:
                pass

        # NaN and Infinity are treated as unparsable
        if number is not None and number.is_finite():
            return Cell(DataType.NUMERIC, number)

        if self.numeric_fallback == NumericFallback.ERROR:
            msg = f"Invalid numeric value {value!r} for column '{column.name}'"
            logger.error(msg)
            raise MalformedNumericError(msg, column=column.name)

        logger.warning(
            "Unparsable numeric value %r for column '%s', using 0", value, column.name
        )
        return Cell(DataType.NUMERIC, Decimal(0))

    def _coerce_timestamp(self, value: Any, column: OutputColumn) -> Cell:
        parsed = parse_timestamp(value) if isinstance(value, str) else None
        if parsed is None:
            msg = f"Invalid timestamp {value!r} for column '{column.name}'"
            logger.error(msg)
            raise MalformedTimestampError(msg, column=column.name)
        return Cell(DataType.TIMESTAMP, parsed)

    def _coerce_json(self, value: Any, column: OutputColumn) -> Cell:
        if isinstance(value, (dict, list)):
            return Cell(DataType.JSON, _to_json_text(value))
        if is_json_string(value):
            return Cell(DataType.JSON, _to_json_text(json.loads(value)))
        return Cell.null()

    def __repr__(self) -> str:
        return f"RowProjector({self.projection.value}, {self.coercion.value})"
