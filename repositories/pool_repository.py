"""
Pool Repository - Database operations for pool management.

Handles all pool-related database operations:
- Pool CRUD (Create, Read, Update, Delete)
- Pool membership rows (pool_posts) and their positions
- Visibility-filtered listings of pools and pool members
"""

import sqlite3
from typing import List, Optional, Tuple

from core.models import PoolMembership, PoolPost, User
from database import get_db_connection
from services.query.predicates import TRUE, Column, Compare, all_of
from services.query.sql import lower
from services.query.visibility import visibility_predicate
from utils.errors import BadRequestError
from utils.logging_config import get_logger

logger = get_logger('PoolRepository')

POOL_ID = Column('pool', 'id')


def _clean_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise BadRequestError("Pool name cannot be empty")
    return name


def _raise_for_duplicate_name(error, name):
    if "UNIQUE" in str(error):
        raise BadRequestError(f"A pool named '{name}' already exists") from error
    raise error


def create_pool(name, uploader_id):
    """Create a new, private pool.

    Args:
        name (str): Pool name, unique across pools
        uploader_id (int): Owner of the pool

    Returns:
        int: ID of the newly created pool
    """
    name = _clean_name(name)
    try:
        with get_db_connection() as conn:
            cursor = conn.execute(
                "INSERT INTO pools (name, uploader_id, is_public) VALUES (?, ?, 0)",
                (name, uploader_id),
            )
            conn.commit()
            pool_id = cursor.lastrowid
    except sqlite3.IntegrityError as e:
        _raise_for_duplicate_name(e, name)

    logger.info(f"Created pool {pool_id} '{name}'")
    return pool_id


def get_pool_row(pool_id):
    """Get a pool without any visibility check.

    Returns:
        dict|None: Pool row, or None if it does not exist
    """
    with get_db_connection() as conn:
        row = conn.execute("SELECT * FROM pools WHERE id = ?", (pool_id,)).fetchone()
        return dict(row) if row else None


def get_visible_pool(pool_id, user: Optional[User]):
    """Get a pool only if the acting identity may see it."""
    where_sql, params = lower(all_of(Compare(POOL_ID, '=', pool_id), visibility_predicate(user, 'pool')))
    with get_db_connection() as conn:
        row = conn.execute(f"SELECT pl.* FROM pools pl WHERE {where_sql}", params).fetchone()
        return dict(row) if row else None


def visible_pools_query(user: Optional[User]) -> Tuple[str, list]:
    """SELECT over the pools the identity may see, oldest first."""
    where_sql, params = lower(visibility_predicate(user, 'pool'))
    sql = f"SELECT pl.id, pl.name, pl.uploader_id, pl.is_public FROM pools pl WHERE {where_sql} ORDER BY pl.id ASC"
    return sql, params


def rename_pool(pool_id, name):
    name = _clean_name(name)
    try:
        with get_db_connection() as conn:
            conn.execute("UPDATE pools SET name = ? WHERE id = ?", (name, pool_id))
            conn.commit()
    except sqlite3.IntegrityError as e:
        _raise_for_duplicate_name(e, name)


def set_pool_visibility(pool_id, is_public):
    with get_db_connection() as conn:
        conn.execute("UPDATE pools SET is_public = ? WHERE id = ?", (1 if is_public else 0, pool_id))
        conn.commit()


def delete_pool(pool_id):
    """Delete a pool. Its memberships cascade; the posts themselves stay."""
    with get_db_connection() as conn:
        conn.execute("DELETE FROM pools WHERE id = ?", (pool_id,))
        conn.commit()
    logger.info(f"Deleted pool {pool_id}")


# ============================================================================
# MEMBERSHIP
# ============================================================================

def get_max_position(conn, pool_id) -> Optional[float]:
    row = conn.execute("SELECT MAX(position) AS max_position FROM pool_posts WHERE pool_id = ?", (pool_id,)).fetchone()
    return row['max_position']


def get_membership(conn, pool_id, post_id) -> Optional[PoolMembership]:
    row = conn.execute(
        "SELECT id, pool_id, post_id, position FROM pool_posts WHERE pool_id = ? AND post_id = ?",
        (pool_id, post_id),
    ).fetchone()
    return PoolMembership.from_row(row) if row else None


def insert_membership(conn, pool_id, post_id, position) -> PoolMembership:
    cursor = conn.execute(
        "INSERT INTO pool_posts (pool_id, post_id, position) VALUES (?, ?, ?)",
        (pool_id, post_id, position),
    )
    return PoolMembership(id=cursor.lastrowid, pool_id=pool_id, post_id=post_id, position=position)


def get_pool_post(pool_post_id) -> Optional[PoolMembership]:
    with get_db_connection() as conn:
        row = conn.execute(
            "SELECT id, pool_id, post_id, position FROM pool_posts WHERE id = ?", (pool_post_id,)
        ).fetchone()
        return PoolMembership.from_row(row) if row else None


def update_pool_post_position(pool_post_id, position):
    with get_db_connection() as conn:
        conn.execute("UPDATE pool_posts SET position = ? WHERE id = ?", (position, pool_post_id))
        conn.commit()


def delete_pool_post(pool_post_id):
    with get_db_connection() as conn:
        conn.execute("DELETE FROM pool_posts WHERE id = ?", (pool_post_id,))
        conn.commit()


def pool_posts_query(pool_id, user: Optional[User], all_members: bool = False) -> Tuple[str, list]:
    """SELECT over a pool's members the identity may see, in position order.

    Untagged members are kept (tags is NULL for them). all_members skips the
    visibility filter, for maintenance passes.
    """
    where_sql, params = lower(TRUE if all_members else visibility_predicate(user, 'post'))
    sql = f"""
        SELECT p.id, p.thumbnail, p.rating, p.media_type,
               pp.id AS pool_post_id, pp.position,
               GROUP_CONCAT(t.name, ' ') AS tags
        FROM pool_posts pp
        JOIN posts p ON p.id = pp.post_id
        LEFT JOIN tag_posts tp ON tp.post_id = p.id
        LEFT JOIN tags t ON t.id = tp.tag_id
        WHERE pp.pool_id = ? AND {where_sql}
        GROUP BY pp.id
        ORDER BY pp.position ASC, pp.id ASC
    """
    return sql, [pool_id, *params]


def get_pool_posts(pool_id, user: Optional[User], all_members: bool = False) -> List[PoolPost]:
    sql, params = pool_posts_query(pool_id, user, all_members)
    with get_db_connection() as conn:
        return [PoolPost.from_row(row) for row in conn.execute(sql, params).fetchall()]


def get_pools_containing_post(post_id, user: Optional[User]) -> List[dict]:
    """Visible pools that have post_id as a member, with the member's position."""
    where_sql, params = lower(visibility_predicate(user, 'pool'))
    with get_db_connection() as conn:
        rows = conn.execute(
            f"""
            SELECT pl.id, pl.name, pp.position
            FROM pools pl
            JOIN pool_posts pp ON pp.pool_id = pl.id
            WHERE pp.post_id = ? AND {where_sql}
            ORDER BY pl.id ASC
            """,
            [post_id, *params],
        ).fetchall()
        return [dict(row) for row in rows]


def rewrite_positions(pool_id, positions_by_member: List[Tuple[float, int]]):
    """Write (position, pool_post_id) pairs for one pool in a single commit."""
    with get_db_connection() as conn:
        conn.executemany(
            "UPDATE pool_posts SET position = ? WHERE id = ? AND pool_id = ?",
            [(position, pool_post_id, pool_id) for position, pool_post_id in positions_by_member],
        )
        conn.commit()
