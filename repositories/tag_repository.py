"""
Tag Repository Module

This module handles all tag-related database operations including:
- Tag creation and lookup (unique on the lowercased name)
- Replacing the tag set of a post
- Bulk rename / merge of one tag into another
- Garbage collection of tags no post uses anymore
"""

from typing import Dict, Iterable, List, Optional

from core.models import Tag
from database import get_db_connection, transaction
from services.query.tokens import is_prefixed_token
from utils.errors import BadRequestError, NotFoundError
from utils.logging_config import get_logger

logger = get_logger('TagRepository')


# ============================================================================
# TAG NORMALIZATION
# ============================================================================

def normalize_tag_name(tag_name: str) -> str:
    return tag_name.lower()


def parse_tag_input(tags_text: Optional[str], drop_prefixed: bool = True) -> List[str]:
    """
    Split user-entered tag text into unique tag names.

    Keeps the first spelling seen for each normalized name. Tokens that carry
    query syntax ("-foo", "rating:s") are dropped unless drop_prefixed is False.
    """
    names: Dict[str, str] = {}
    for token in (tags_text or "").split():
        if drop_prefixed and is_prefixed_token(token):
            continue
        names.setdefault(normalize_tag_name(token), token)
    return list(names.values())


# ============================================================================
# TAG CREATION AND RETRIEVAL
# ============================================================================

def upsert_tags_with_conn(conn, tag_names: Iterable[str]) -> List[Tag]:
    """
    Make sure a tag row exists for every name and return those rows.

    An existing row with the same normalized name is reused as-is, keeping its
    display spelling. Runs on the caller's connection so it can join a wider
    transaction.
    """
    names: Dict[str, str] = {}
    for name in tag_names:
        names.setdefault(normalize_tag_name(name), name)
    if not names:
        return []

    conn.executemany(
        """
        INSERT INTO tags (name, normalized_name) VALUES (?, ?)
        ON CONFLICT(normalized_name) DO NOTHING
        """,
        [(name, normalized) for normalized, name in names.items()],
    )

    placeholders = ", ".join("?" for _ in names)
    rows = conn.execute(
        f"SELECT id, name, normalized_name FROM tags WHERE normalized_name IN ({placeholders}) ORDER BY name",
        list(names),
    ).fetchall()
    return [Tag.from_row(row) for row in rows]


def upsert_tags(tag_names: Iterable[str]) -> List[Tag]:
    """Insert-or-ignore tags by normalized name and return the matching rows."""
    with get_db_connection() as conn:
        with transaction(conn):
            return upsert_tags_with_conn(conn, tag_names)


def get_tag(tag_name: str) -> Optional[Tag]:
    """Look up a tag by any spelling of its name."""
    with get_db_connection() as conn:
        row = conn.execute(
            "SELECT id, name, normalized_name FROM tags WHERE normalized_name = ?",
            (normalize_tag_name(tag_name),),
        ).fetchone()
        return Tag.from_row(row) if row else None


def get_tags_for_post(post_id: int) -> List[Tag]:
    """Tags of a post, ordered by name."""
    with get_db_connection() as conn:
        rows = conn.execute(
            """
            SELECT t.id, t.name, t.normalized_name
            FROM tags t
            JOIN tag_posts tp ON tp.tag_id = t.id
            WHERE tp.post_id = ?
            ORDER BY t.name
            """,
            (post_id,),
        ).fetchall()
        return [Tag.from_row(row) for row in rows]


def find_tags_by_prefix(prefix: str, limit: int) -> List[Tag]:
    """Tags whose lowercased name starts with prefix, for autocompletion."""
    # LIKE wildcards in user input are matched literally
    escaped = (normalize_tag_name(prefix)
               .replace('\\', '\\\\')
               .replace('%', '\\%')
               .replace('_', '\\_'))
    with get_db_connection() as conn:
        rows = conn.execute(
            """
            SELECT id, name, normalized_name FROM tags
            WHERE normalized_name LIKE ? ESCAPE '\\'
            ORDER BY normalized_name
            LIMIT ?
            """,
            (escaped + '%', limit),
        ).fetchall()
        return [Tag.from_row(row) for row in rows]


# ============================================================================
# POST TAG ASSOCIATIONS
# ============================================================================

def set_post_tags_with_conn(conn, post_id: int, tag_names: Iterable[str]) -> List[Tag]:
    """Replace every tag association of a post on the caller's connection."""
    conn.execute("DELETE FROM tag_posts WHERE post_id = ?", (post_id,))
    tags = upsert_tags_with_conn(conn, tag_names)
    conn.executemany(
        "INSERT OR IGNORE INTO tag_posts (post_id, tag_id) VALUES (?, ?)",
        [(post_id, tag.id) for tag in tags],
    )
    return tags


def replace_post_tags(post_id: int, tags_text: str) -> List[Tag]:
    """
    Replace a post's tags with the ones in tags_text.

    The replacement is all-or-nothing; tags left without posts are collected
    afterwards.
    """
    with get_db_connection() as conn:
        if conn.execute("SELECT 1 FROM posts WHERE id = ?", (post_id,)).fetchone() is None:
            raise NotFoundError()
        with transaction(conn):
            tags = set_post_tags_with_conn(conn, post_id, parse_tag_input(tags_text))

    garbage_collect_tags()
    return tags


# ============================================================================
# BULK EDIT
# ============================================================================

def _single_token(text: Optional[str], message: str) -> str:
    tokens = (text or "").split()
    if len(tokens) != 1:
        raise BadRequestError(message)
    return tokens[0]


def rename_or_merge_tag(old_tag_text: str, new_tag_text: str) -> dict:
    """
    Rename a tag, or merge it into an existing one.

    When a different tag already has the new normalized name, every post of
    the old tag that lacks the new tag is moved over and the old tag is
    deleted (its remaining duplicate associations cascade away). Otherwise
    the old tag is renamed in place, which also covers a change of case.

    Returns:
        dict: {'tag': Tag, 'merged': bool}

    Raises:
        BadRequestError: If either side is not exactly one tag
        NotFoundError: If the old tag does not exist
    """
    old_name = _single_token(old_tag_text, "expected single tag to edit")
    new_name = _single_token(new_tag_text, "expected single new tag")
    if is_prefixed_token(new_name):
        raise BadRequestError(f"Tag names cannot start with '-' or 'rating:': {new_name}")

    normalized_old = normalize_tag_name(old_name)
    normalized_new = normalize_tag_name(new_name)

    with get_db_connection() as conn:
        with transaction(conn):
            old_row = conn.execute(
                "SELECT id, name, normalized_name FROM tags WHERE normalized_name = ?",
                (normalized_old,),
            ).fetchone()
            if old_row is None:
                raise NotFoundError(f"Tag not found: {old_name}")

            target_row = conn.execute(
                "SELECT id, name, normalized_name FROM tags WHERE normalized_name = ?",
                (normalized_new,),
            ).fetchone()

            if target_row is not None and target_row['id'] != old_row['id']:
                moved = conn.execute(
                    """
                    UPDATE tag_posts SET tag_id = ?
                    WHERE tag_id = ?
                      AND post_id NOT IN (SELECT post_id FROM tag_posts WHERE tag_id = ?)
                    """,
                    (target_row['id'], old_row['id'], target_row['id']),
                ).rowcount
                conn.execute("DELETE FROM tags WHERE id = ?", (old_row['id'],))
                logger.info(f"Merged tag '{old_row['name']}' into '{target_row['name']}' ({moved} posts moved)")
                return {'tag': Tag.from_row(target_row), 'merged': True}

            conn.execute(
                "UPDATE tags SET name = ?, normalized_name = ? WHERE id = ?",
                (new_name, normalized_new, old_row['id']),
            )
            logger.info(f"Renamed tag '{old_row['name']}' to '{new_name}'")
            return {'tag': Tag(id=old_row['id'], name=new_name, normalized_name=normalized_new), 'merged': False}


# ============================================================================
# GARBAGE COLLECTION
# ============================================================================

def garbage_collect_tags() -> int:
    """
    Delete every tag with no post associations.

    Returns:
        int: Number of tags removed
    """
    with get_db_connection() as conn:
        removed = conn.execute(
            """
            DELETE FROM tags WHERE id IN (
                SELECT t.id FROM tags t
                LEFT JOIN tag_posts tp ON tp.tag_id = t.id
                GROUP BY t.id
                HAVING COUNT(tp.id) = 0
            )
            """
        ).rowcount
        conn.commit()

    if removed:
        logger.info(f"Garbage-collected {removed} unused tags")
    return removed
