"""
Tests for output formatters
"""

import json
from datetime import datetime
from decimal import Decimal

import pytest

from sheetscan.cli.formatters import (
    CSVFormatter,
    JSONFormatter,
    MarkdownFormatter,
    TableFormatter,
    get_formatter,
)


@pytest.fixture
def rows():
    return [
        {"name": "Alice", "amount": Decimal("19.99"), "at": datetime(2024, 1, 15, 10, 30)},
        {"name": "B|ob", "amount": None, "at": None},
    ]


class TestGetFormatter:
    def test_known(self):
        assert isinstance(get_formatter("json"), JSONFormatter)
        assert get_formatter("markdown").get_name() == "markdown"
        assert get_formatter("table").get_name() == "table"

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown format"):
            get_formatter("xml")


class TestJSONFormatter:
    def test_typed_values_as_text(self, rows):
        data = json.loads(JSONFormatter().format(rows))
        assert data[0] == {"name": "Alice", "amount": "19.99", "at": "2024-01-15 10:30:00"}
        assert data[1]["amount"] is None

    def test_indented(self, rows):
        assert JSONFormatter().format(rows).startswith("[\n  {\n    \"name\": \"Alice\"")

    def test_empty(self):
        assert json.loads(JSONFormatter().format([])) == []


class TestCSVFormatter:
    def test_quotes_delimiters(self):
        output = CSVFormatter().format([{"name": "Smith, J", "note": 'say "hi"'}])
        assert output.splitlines()[1] == '"Smith, J","say ""hi"""'

    def test_rows(self, rows):
        lines = CSVFormatter().format(rows).splitlines()
        assert lines == ["name,amount,at", "Alice,19.99,2024-01-15 10:30:00", "B|ob,,"]

    def test_empty(self):
        assert CSVFormatter().format([]) == ""


class TestMarkdownFormatter:
    def test_rows(self, rows):
        output = MarkdownFormatter().format(rows)
        assert "| name | amount | at |" in output
        assert "| Alice | 19.99 | 2024-01-15 10:30:00 |" in output
        assert "| B\\|ob | _NULL_ | _NULL_ |" in output
        assert output.endswith("_2 rows_")

    def test_no_footer(self, rows):
        assert "rows_" not in MarkdownFormatter().format(rows, show_footer=False)

    def test_empty(self):
        assert MarkdownFormatter().format([]) == "_No rows._"


class TestTableFormatter:
    def test_rows(self, rows):
        output = TableFormatter().format(rows, no_color=True)
        assert "Alice" in output
        assert "19.99" in output
        assert "NULL" in output
        assert "2 rows" in output

    def test_no_footer(self, rows):
        assert "2 rows" not in TableFormatter().format(rows, no_color=True, show_footer=False)

    def test_empty(self):
        assert TableFormatter().format([]) == "No rows."
