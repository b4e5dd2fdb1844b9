"""Tests for the scan lifecycle."""

from datetime import datetime
from decimal import Decimal
from unittest.mock import patch

import pytest

from sheetscan import ScanState, SheetAdapter
from sheetscan.core.config import AdapterConfig, NumericFallback
from sheetscan.core.errors import (
    ColumnNotFoundError,
    ConfigError,
    MalformedTimestampError,
    TransportError,
    UnexpectedShapeError,
    UnsupportedOperationError,
)
from sheetscan.core.types import Cell, DataType, OutputColumn

COLUMNS = [
    OutputColumn("name", DataType.STRING, 0),
    OutputColumn("salary", DataType.NUMERIC, 1),
    OutputColumn("active", DataType.BOOL, 2),
    OutputColumn("hired", DataType.TIMESTAMP, 3),
]


@pytest.fixture
def adapter():
    adapter = SheetAdapter()
    adapter.init()
    return adapter


@pytest.fixture
def mock_get(sample_body, response):
    with patch("httpx.get", return_value=response(sample_body)) as mock:
        yield mock


class TestLifecycle:
    """Test begin, iterate and end of a scan."""

    def test_n_rows_then_none(self, adapter, mock_get):
        adapter.begin_scan({"object": "1AbC"})

        results = [adapter.iter_scan(COLUMNS) for _ in range(3)]
        assert all(cells is not None for cells in results)
        assert adapter.iter_scan(COLUMNS) is None
        # Exhaustion is idempotent
        assert adapter.iter_scan(COLUMNS) is None
        assert adapter.iter_scan(COLUMNS) is None

    def test_row_values(self, adapter, mock_get):
        adapter.begin_scan({"object": "1AbC"})

        first = adapter.iter_scan(COLUMNS)
        assert first == [
            Cell(DataType.STRING, "Alice"),
            Cell(DataType.NUMERIC, Decimal("120000")),
            Cell(DataType.BOOL, True),
            Cell(DataType.TIMESTAMP, datetime(2020, 1, 15, 9, 30)),
        ]

        adapter.iter_scan(COLUMNS)
        third = adapter.iter_scan(COLUMNS)
        assert third[1] == Cell.null()
        assert third[3].value == datetime(2022, 3, 10, 8, 0)

    def test_cells_match_requested_columns(self, adapter, mock_get):
        adapter.begin_scan({"object": "1AbC"})
        columns = [COLUMNS[2], COLUMNS[0]]

        cells = adapter.iter_scan(columns)
        assert len(cells) == 2
        assert cells[0].kind == DataType.BOOL
        assert cells[1].value == "Alice"

    def test_state_transitions(self, adapter, mock_get):
        assert adapter.state == ScanState.IDLE

        adapter.begin_scan({"object": "1AbC"})
        assert adapter.state == ScanState.ACTIVE
        assert adapter.cursor.position == 0

        for _ in range(3):
            adapter.iter_scan(COLUMNS)
        assert adapter.state == ScanState.EXHAUSTED

        adapter.end_scan()
        assert adapter.state == ScanState.CLOSED
        assert len(adapter.cursor) == 0
        assert adapter.cursor.position == 0

    def test_end_scan_before_exhaustion(self, adapter, mock_get):
        adapter.begin_scan({"object": "1AbC"})
        adapter.iter_scan(COLUMNS)
        adapter.end_scan()

        assert adapter.state == ScanState.CLOSED
        assert adapter.iter_scan(COLUMNS) is None

    def test_new_scan_after_end_refetches(self, adapter, mock_get):
        adapter.begin_scan({"object": "1AbC"})
        adapter.iter_scan(COLUMNS)
        adapter.end_scan()

        adapter.begin_scan({"object": "1AbC"})
        assert adapter.state == ScanState.ACTIVE
        assert adapter.iter_scan(COLUMNS)[0].value == "Alice"
        assert mock_get.call_count == 2

    def test_pull_while_idle_returns_none(self, adapter):
        assert adapter.iter_scan(COLUMNS) is None

    def test_empty_table(self, adapter, wrap, response):
        with patch("httpx.get", return_value=response(wrap({"table": {"rows": []}}))):
            adapter.begin_scan({"object": "1AbC"})

        assert adapter.state == ScanState.EXHAUSTED
        assert adapter.iter_scan(COLUMNS) is None

    def test_schema_from_cols(self, adapter, mock_get):
        assert adapter.get_schema() is None
        adapter.begin_scan({"object": "1AbC"})
        assert adapter.get_schema().get_column_names() == ["name", "salary", "active", "hired"]
        adapter.end_scan()
        assert adapter.get_schema() is None

    def test_explicit_config(self, sample_body, response):
        adapter = SheetAdapter(AdapterConfig(base_url="https://sheets.example.com"))

        with patch("httpx.get", return_value=response(sample_body)) as mock:
            adapter.begin_scan({"object": "1AbC"})

        assert mock.call_args[0][0].startswith("https://sheets.example.com/1AbC/")


class TestErrors:
    """Test that every failure aborts the scan."""

    def test_begin_without_init(self):
        with pytest.raises(ConfigError, match="init"):
            SheetAdapter().begin_scan({"object": "1AbC"})

    def test_missing_object_before_network(self, adapter):
        with patch("httpx.get") as mock:
            with pytest.raises(ConfigError, match="'object'"):
                adapter.begin_scan({})
        mock.assert_not_called()
        assert adapter.state == ScanState.IDLE

    def test_unexpected_shape_never_activates(self, adapter, wrap, response):
        with patch("httpx.get", return_value=response(wrap({"table": {}}))):
            with pytest.raises(UnexpectedShapeError):
                adapter.begin_scan({"object": "1AbC"})

        assert adapter.state == ScanState.IDLE
        assert adapter.iter_scan(COLUMNS) is None

    def test_transport_failure(self, adapter):
        with patch("httpx.get", side_effect=Exception("Connection refused")):
            with pytest.raises(TransportError):
                adapter.begin_scan({"object": "1AbC"})
        assert adapter.state == ScanState.IDLE

    def test_second_begin_rejected(self, adapter, mock_get):
        adapter.begin_scan({"object": "1AbC"})
        with pytest.raises(UnsupportedOperationError, match="already active"):
            adapter.begin_scan({"object": "1AbC"})

    def test_column_not_found_ends_scan(self, adapter, mock_get):
        adapter.begin_scan({"object": "1AbC"})
        with pytest.raises(ColumnNotFoundError, match="'extra'"):
            adapter.iter_scan([OutputColumn("extra", DataType.STRING, 9)])

        assert adapter.state == ScanState.CLOSED
        assert len(adapter.cursor) == 0
        assert adapter.iter_scan(COLUMNS) is None

        adapter.begin_scan({"object": "1AbC"})
        assert adapter.state == ScanState.ACTIVE
        assert adapter.iter_scan(COLUMNS)[0].value == "Alice"

    def test_malformed_timestamp(self, adapter, wrap, response):
        payload = {"table": {"rows": [{"c": [{"v": "not-a-date"}]}]}}
        with patch("httpx.get", return_value=response(wrap(payload))):
            adapter.begin_scan({"object": "1AbC"})

        with pytest.raises(MalformedTimestampError):
            adapter.iter_scan([OutputColumn("ts", DataType.TIMESTAMP, 0)])
        assert adapter.state == ScanState.CLOSED

    def test_strict_numeric_from_server_options(self, wrap, response):
        adapter = SheetAdapter()
        config = adapter.init({"numeric_fallback": "error"})
        assert config.numeric_fallback == NumericFallback.ERROR

        payload = {"table": {"rows": [{"c": [{"v": "N/A"}]}]}}
        with patch("httpx.get", return_value=response(wrap(payload))):
            adapter.begin_scan({"object": "1AbC"})

        with pytest.raises(ValueError, match="N/A"):
            adapter.iter_scan([OutputColumn("amount", DataType.NUMERIC, 0)])


class TestUnsupportedOperations:
    """Test the read-only, single-pass restrictions."""

    def test_re_scan_when_idle(self, adapter):
        with pytest.raises(UnsupportedOperationError, match="Re-scan"):
            adapter.re_scan()

    def test_re_scan_in_every_state(self, adapter, mock_get):
        adapter.begin_scan({"object": "1AbC"})
        with pytest.raises(UnsupportedOperationError):
            adapter.re_scan()

        for _ in range(3):
            adapter.iter_scan(COLUMNS)
        with pytest.raises(UnsupportedOperationError):
            adapter.re_scan()

        adapter.end_scan()
        with pytest.raises(UnsupportedOperationError):
            adapter.re_scan()

    def test_re_scan_leaves_cursor_untouched(self, adapter, mock_get):
        adapter.begin_scan({"object": "1AbC"})
        adapter.iter_scan(COLUMNS)
        with pytest.raises(UnsupportedOperationError):
            adapter.re_scan()
        assert adapter.cursor.position == 1

    @pytest.mark.parametrize(
        "operation,args",
        [
            ("begin_modify", ()),
            ("insert", ([],)),
            ("update", (1, [])),
            ("delete", (1,)),
            ("end_modify", ()),
        ],
    )
    def test_write_operations(self, adapter, operation, args):
        with pytest.raises(UnsupportedOperationError, match="not supported"):
            getattr(adapter, operation)(*args)


class TestScanGenerator:
    """Test the one-call scan helper."""

    def test_all_columns_by_default(self, adapter, mock_get):
        rows = list(adapter.scan({"object": "1AbC"}))

        assert len(rows) == 3
        assert [cell.kind for cell in rows[0]] == [
            DataType.STRING,
            DataType.NUMERIC,
            DataType.BOOL,
            DataType.TIMESTAMP,
        ]
        assert adapter.state == ScanState.CLOSED

    def test_ends_scan_on_early_stop(self, adapter, mock_get):
        rows = adapter.scan({"object": "1AbC"}, COLUMNS[:1])
        assert next(rows)[0].value == "Alice"
        rows.close()
        assert adapter.state == ScanState.CLOSED

    def test_ends_scan_on_error(self, adapter, mock_get):
        with pytest.raises(ColumnNotFoundError):
            list(adapter.scan({"object": "1AbC"}, [OutputColumn("x", DataType.STRING, 9)]))
        assert adapter.state == ScanState.CLOSED
