"""Offset pagination over an arbitrary SELECT."""

import math
import sqlite3
from typing import Any, List, Optional, Sequence

from utils.errors import BadRequestError


def page_index(page: Optional[int]) -> int:
    """1-based page number to 0-based index. Page 0, negatives and None all map to the first page."""
    if not page or page < 1:
        return 0
    return page - 1


def parse_page(value: Any, default: int = 1) -> int:
    """Parse a page parameter from a request, raising BadRequestError on garbage."""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequestError(f"Invalid page number: {value!r}")


class Paginator:
    """
    Count and slice the rows of a query.

    Usage:
        paginator = Paginator(conn, "SELECT ... ORDER BY id DESC", params, 50)
        rows = paginator.fetch_page(page_index(page))
        total_pages = paginator.num_pages()
    """

    def __init__(self, conn: sqlite3.Connection, sql: str, params: Sequence[Any], page_size: int):
        if page_size < 1:
            raise BadRequestError("Page size must be positive")
        self.conn = conn
        self.sql = sql
        self.params = list(params)
        self.page_size = page_size
        self._num_items: Optional[int] = None

    def num_items(self) -> int:
        if self._num_items is None:
            row = self.conn.execute(f"SELECT COUNT(*) FROM ({self.sql})", self.params).fetchone()
            self._num_items = row[0]
        return self._num_items

    def num_pages(self) -> int:
        return math.ceil(self.num_items() / self.page_size)

    def fetch_page(self, index: int) -> List[sqlite3.Row]:
        """Rows for a 0-based page index. Past the end yields an empty list."""
        offset = max(index, 0) * self.page_size
        cursor = self.conn.execute(
            f"{self.sql} LIMIT ? OFFSET ?",
            [*self.params, self.page_size, offset],
        )
        return cursor.fetchall()
