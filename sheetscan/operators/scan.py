"""
Scan cursor - the materialized row buffer of one scan

Holds the fetched rows and a position marker. The cursor only moves
forward; exhaustion is signalled by position == len(rows).
"""

from typing import Any, Dict, List, Optional


class ScanCursor:
    """
    Forward-only cursor over fetched rows

    Invariant: 0 <= position <= len(rows)
    """

    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.position = 0

    def load(self, rows: List[Dict[str, Any]]) -> None:
        """Take ownership of a freshly fetched row buffer and rewind to 0"""
        self.rows = rows
        self.position = 0

    @property
    def is_exhausted(self) -> bool:
        return self.position >= len(self.rows)

    def current(self) -> Optional[Dict[str, Any]]:
        """Row under the cursor, or None when exhausted"""
        if self.is_exhausted:
            return None
        return self.rows[self.position]

    def advance(self) -> None:
        """Move past the current row (no-op when exhausted)"""
        if not self.is_exhausted:
            self.position += 1

    def clear(self) -> None:
        """Drop the buffer and reset the position"""
        self.rows = []
        self.position = 0

    def __len__(self) -> int:
        return len(self.rows)

    def __repr__(self) -> str:
        return f"ScanCursor({self.position}/{len(self.rows)})"
