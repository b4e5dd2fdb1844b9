"""
Tests for the scan cursor
"""

from sheetscan.operators.scan import ScanCursor


class TestScanCursor:
    """Test cursor movement and exhaustion"""

    def test_new_cursor_is_exhausted(self):
        cursor = ScanCursor()
        assert cursor.is_exhausted
        assert cursor.current() is None

    def test_walks_rows_in_order(self):
        cursor = ScanCursor()
        cursor.load([{"n": 1}, {"n": 2}])

        seen = []
        while not cursor.is_exhausted:
            seen.append(cursor.current()["n"])
            cursor.advance()

        assert seen == [1, 2]
        assert cursor.position == 2

    def test_advance_never_passes_end(self):
        cursor = ScanCursor()
        cursor.load([{"n": 1}])
        for _ in range(5):
            cursor.advance()
        assert cursor.position == len(cursor) == 1

    def test_load_rewinds(self):
        cursor = ScanCursor()
        cursor.load([{"n": 1}])
        cursor.advance()
        cursor.load([{"n": 2}, {"n": 3}])
        assert cursor.position == 0
        assert cursor.current() == {"n": 2}

    def test_clear(self):
        cursor = ScanCursor()
        cursor.load([{"n": 1}, {"n": 2}])
        cursor.advance()
        cursor.clear()
        assert len(cursor) == 0
        assert cursor.position == 0
        assert repr(cursor) == "ScanCursor(0/0)"
