"""
Sheet adapter - the scan lifecycle a host engine drives

    adapter = SheetAdapter()
    adapter.init({"base_url": "..."})
    adapter.begin_scan({"object": "<spreadsheet id>"})
    while (cells := adapter.iter_scan(columns)) is not None:
        ...
    adapter.end_scan()

One adapter instance owns one cursor and serves one scan at a time. The
remote table is read-only and materialized once per scan, so re-scan and
every write operation fail with UnsupportedOperationError.
"""

import logging
from enum import Enum
from typing import Any, Iterator, List, Mapping, Optional

from sheetscan.core.config import AdapterConfig, TableRequest
from sheetscan.core.errors import ConfigError, ProjectionError, UnsupportedOperationError
from sheetscan.core.types import Cell, OutputColumn, Schema
from sheetscan.operators.project import RowProjector
from sheetscan.operators.scan import ScanCursor
from sheetscan.readers.fetcher import RemoteTableFetcher

logger = logging.getLogger(__name__)


class ScanState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    EXHAUSTED = "exhausted"
    CLOSED = "closed"


class SheetAdapter:
    """
    Read-only, single-pass adapter over a remote spreadsheet table

    Attributes:
        config: Server configuration (None until init() is called)
        cursor: Row buffer of the current scan
    """

    def __init__(self, config: Optional[AdapterConfig] = None):
        self.config = config
        self.cursor = ScanCursor()
        self.fetcher: Optional[RemoteTableFetcher] = None
        self.projector: Optional[RowProjector] = None
        self.schema: Optional[Schema] = None
        self._scan_open = False
        self._closed = False

        if config is not None:
            self._configure(config)

    def _configure(self, config: AdapterConfig) -> None:
        self.config = config
        self.fetcher = RemoteTableFetcher(config)
        self.projector = RowProjector(
            projection=config.projection,
            coercion=config.coercion,
            numeric_fallback=config.numeric_fallback,
        )

    @property
    def state(self) -> ScanState:
        if self._scan_open:
            return ScanState.EXHAUSTED if self.cursor.is_exhausted else ScanState.ACTIVE
        return ScanState.CLOSED if self._closed else ScanState.IDLE

    def init(self, server_options: Optional[Mapping[str, str]] = None) -> AdapterConfig:
        """Resolve server configuration; call once before the first scan"""
        self._configure(AdapterConfig.from_options(server_options))
        return self.config

    def begin_scan(self, table_options: Optional[Mapping[str, str]] = None) -> None:
        """
        Fetch the remote table and position the cursor on its first row

        Raises:
            ConfigError: If init() was not called or the table options are invalid
            UnsupportedOperationError: If a scan is already open on this adapter
            FetchError: If the table cannot be fetched
        """
        if self.config is None:
            raise ConfigError("Adapter is not initialized; call init() first")
        if self._scan_open:
            raise UnsupportedOperationError(
                "A scan is already active on this adapter; concurrent scans are not supported"
            )

        request = TableRequest.from_options(table_options)
        table = self.fetcher.fetch_table(request)

        self.cursor.load(table.rows)
        self.schema = Schema.from_gviz_cols(table.cols)
        self._scan_open = True
        self._closed = False
        logger.debug("Scan of %s active with %d rows", request.object_identifier, len(self.cursor))

    def iter_scan(self, columns: List[OutputColumn]) -> Optional[List[Cell]]:
        """
        Pull the next row

        Returns:
            Cells in ``columns`` order, or None once the rows are exhausted
            (and on every later call). None is also returned when no scan is open.

        Raises:
            ProjectionError: If the row cannot be projected; the scan is ended first
        """
        row = self.cursor.current() if self._scan_open else None
        if row is None:
            return None

        try:
            cells = self.projector.project(row, columns)
        except ProjectionError:
            self.end_scan()
            raise
        self.cursor.advance()
        return cells

    def re_scan(self) -> None:
        raise UnsupportedOperationError("Re-scan on foreign table is not supported")

    def end_scan(self) -> None:
        """Drop the row buffer; the adapter can begin a new scan afterwards"""
        if self._scan_open:
            logger.debug("Scan ended at row %d of %d", self.cursor.position, len(self.cursor))
            self._closed = True
        self._scan_open = False
        self.cursor.clear()
        self.schema = None

    def get_schema(self) -> Optional[Schema]:
        """Schema of the open scan, inferred from the table's column metadata"""
        return self.schema

    def begin_modify(self) -> None:
        raise UnsupportedOperationError("Modify on foreign table is not supported")

    def insert(self, row: Any) -> None:
        raise UnsupportedOperationError("Insert on foreign table is not supported")

    def update(self, rowid: Any, row: Any) -> None:
        raise UnsupportedOperationError("Update on foreign table is not supported")

    def delete(self, rowid: Any) -> None:
        raise UnsupportedOperationError("Delete on foreign table is not supported")

    def end_modify(self) -> None:
        raise UnsupportedOperationError("Modify on foreign table is not supported")

    def scan(
        self, table_options: Mapping[str, str], columns: Optional[List[OutputColumn]] = None
    ) -> Iterator[List[Cell]]:
        """
        Run one complete scan, yielding each row's cells

        Without explicit columns, every column of the table schema is
        projected in source order. The scan is always ended, even when the
        consumer stops early or projection fails.
        """
        self.begin_scan(table_options)
        try:
            if columns is None:
                columns = self.schema.to_columns()
            while True:
                cells = self.iter_scan(columns)
                if cells is None:
                    break
                yield cells
        finally:
            self.end_scan()

    def __repr__(self) -> str:
        return f"SheetAdapter({self.state.value}, {self.cursor!r})"
