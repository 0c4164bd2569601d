"""
Database transaction helpers.

Writes that must keep several rows consistent (replacing a post's tag
associations, merging one tag into another) go through transaction() so a
failure halfway leaves nothing behind.
"""

from contextlib import contextmanager
from typing import Generator
import sqlite3


@contextmanager
def transaction(conn: sqlite3.Connection) -> Generator[sqlite3.Connection, None, None]:
    """
    Run a batch of writes as a single all-or-nothing unit.

    Opens an IMMEDIATE transaction so the write lock is taken up front. When
    the connection already has an open transaction, a savepoint is used
    instead so the batch still rolls back on its own.

    Usage:
        with get_db_connection() as conn:
            with transaction(conn):
                conn.execute("DELETE FROM tag_posts WHERE post_id = ?", (post_id,))
                conn.executemany("INSERT INTO tag_posts ...", rows)

    Yields:
        sqlite3.Connection: The same connection
    """
    if conn.in_transaction:
        conn.execute("SAVEPOINT batch_write")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK TO SAVEPOINT batch_write")
            conn.execute("RELEASE SAVEPOINT batch_write")
            raise
        conn.execute("RELEASE SAVEPOINT batch_write")
        return

    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    conn.commit()
