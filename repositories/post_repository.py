"""
Post Repository - Database operations for posts.

Handles:
- Creating posts from already-stored media files
- Visibility-checked single post fetches
- Parent / child relations
- Detail edits (title, description, visibility, rating, sources, tags, parent)
- Deletion with detached file cleanup
"""

import os
from typing import List, Optional

import config
from core.models import MediaType, PostOverview, Rating, User
from database import get_db_connection, transaction
from repositories.tag_repository import (
    garbage_collect_tags,
    get_tags_for_post,
    parse_tag_input,
    set_post_tags_with_conn,
)
from services.background_tasks import remove_files_in_background
from services.query.predicates import Column, Compare, all_of
from services.query.search import overview_query
from services.query.sql import lower
from services.query.visibility import ensure_can_edit, visibility_predicate
from utils.errors import BadRequestError, NotFoundError
from utils.logging_config import get_logger

logger = get_logger('PostRepository')

POST_ID = Column('post', 'id')
PARENT_ID = Column('post', 'parent_id')


def create_post(uploader_id: int, media: str, media_type: str, width: int, height: int,
                thumbnail: str, thumbnail_width: int, thumbnail_height: int,
                tags_text: str = "") -> int:
    """Create a private, unrated post for files already written to FILES_DIRECTORY.

    Args:
        uploader_id (int): Owner of the post
        media (str): Media file name
        media_type (str): 'image' or 'video'
        width, height (int): Media dimensions
        thumbnail (str): Thumbnail file name
        thumbnail_width, thumbnail_height (int): Thumbnail dimensions
        tags_text (str): Whitespace-separated tags; '-' and 'rating:' tokens are dropped

    Returns:
        int: ID of the newly created post
    """
    try:
        media_type = MediaType(media_type).value
    except ValueError:
        raise BadRequestError(f"Unknown media type: {media_type}")

    with get_db_connection() as conn:
        with transaction(conn):
            cursor = conn.execute(
                """
                INSERT INTO posts (uploader_id, media, media_type, width, height,
                                   thumbnail, thumbnail_width, thumbnail_height,
                                   is_public, rating)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, ?)
                """,
                (uploader_id, media, media_type, width, height,
                 thumbnail, thumbnail_width, thumbnail_height, Rating.UNRATED.value),
            )
            post_id = cursor.lastrowid
            set_post_tags_with_conn(conn, post_id, parse_tag_input(tags_text))

    logger.info(f"Created post {post_id} for user {uploader_id}")
    return post_id


def get_post_row(post_id: int) -> Optional[dict]:
    """Raw post row without any visibility check."""
    with get_db_connection() as conn:
        row = conn.execute("SELECT * FROM posts WHERE id = ?", (post_id,)).fetchone()
        return dict(row) if row else None


def get_post_sources(post_id: int) -> List[str]:
    with get_db_connection() as conn:
        rows = conn.execute(
            "SELECT url FROM post_sources WHERE post_id = ? ORDER BY id", (post_id,)
        ).fetchall()
        return [row['url'] for row in rows]


def get_post(post_id: int, user: Optional[User] = None) -> dict:
    """Fetch a post the acting identity may see, with its tags and sources.

    Raises:
        NotFoundError: If the post does not exist or is not visible
    """
    where_sql, params = lower(all_of(Compare(POST_ID, '=', post_id), visibility_predicate(user)))
    with get_db_connection() as conn:
        row = conn.execute(f"SELECT p.* FROM posts p WHERE {where_sql}", params).fetchone()
    if row is None:
        raise NotFoundError()

    post = dict(row)
    post['is_public'] = bool(post['is_public'])
    post['tags'] = [tag.to_dict() for tag in get_tags_for_post(post_id)]
    post['sources'] = get_post_sources(post_id)
    return post


def _visible_overviews(predicate, user: Optional[User]) -> List[PostOverview]:
    sql, params = overview_query(all_of(predicate, visibility_predicate(user)))
    with get_db_connection() as conn:
        return [PostOverview.from_row(row) for row in conn.execute(sql, params).fetchall()]


def get_related_posts(post: dict, user: Optional[User] = None) -> dict:
    """Parent and children of a post, each filtered by visibility."""
    parent = None
    if post.get('parent_id') is not None:
        parents = _visible_overviews(Compare(POST_ID, '=', post['parent_id']), user)
        parent = parents[0] if parents else None

    children = _visible_overviews(Compare(PARENT_ID, '=', post['id']), user)
    return {'parent': parent, 'children': children}


def _resolve_parent(parent_text, post_id: int, user: Optional[User]) -> Optional[int]:
    """Parent id for a details edit; unparsable, invisible or self references clear it."""
    try:
        parent_id = int(str(parent_text or "").strip())
    except ValueError:
        return None
    if parent_id == post_id:
        return None

    where_sql, params = lower(all_of(Compare(POST_ID, '=', parent_id), visibility_predicate(user)))
    with get_db_connection() as conn:
        row = conn.execute(f"SELECT p.id FROM posts p WHERE {where_sql}", params).fetchone()
    return row['id'] if row else None


def update_post_details(post_id: int, user: Optional[User], title: Optional[str] = None,
                        description: Optional[str] = None, is_public: bool = False,
                        rating: str = Rating.UNRATED.value, sources: Optional[List[str]] = None,
                        tags_text: str = "", parent_text: Optional[str] = None) -> dict:
    """Replace the editable details of a post.

    Blank title/description are stored as NULL. Sources and tags are replaced
    wholesale in one transaction; unused tags are collected afterwards.

    Returns:
        dict: The updated post, as returned by get_post()

    Raises:
        NotFoundError: If the post does not exist
        ForbiddenError: If the identity may not edit the post
        BadRequestError: If the rating is not a known code
    """
    existing = get_post_row(post_id)
    if existing is None:
        raise NotFoundError()
    ensure_can_edit(existing['uploader_id'], user)

    if rating not in Rating.codes():
        raise BadRequestError(f"Unknown rating: {rating}")

    title = (title or "").strip() or None
    description = (description or "").strip() or None
    parent_id = _resolve_parent(parent_text, post_id, user)
    source_urls = [url.strip() for url in (sources or []) if url and url.strip()]

    with get_db_connection() as conn:
        with transaction(conn):
            conn.execute(
                """
                UPDATE posts
                SET title = ?, description = ?, is_public = ?, rating = ?, parent_id = ?
                WHERE id = ?
                """,
                (title, description, 1 if is_public else 0, rating, parent_id, post_id),
            )
            conn.execute("DELETE FROM post_sources WHERE post_id = ?", (post_id,))
            conn.executemany(
                "INSERT INTO post_sources (url, post_id) VALUES (?, ?)",
                [(url, post_id) for url in source_urls],
            )
            set_post_tags_with_conn(conn, post_id, parse_tag_input(tags_text))

    garbage_collect_tags()
    logger.info(f"Updated details of post {post_id}")
    return get_post(post_id, user)


def delete_post(post_id: int, user: Optional[User]):
    """Delete a post and, in the background, its media and thumbnail files.

    Tag associations, sources and pool memberships cascade with the row.

    Raises:
        NotFoundError: If the post does not exist
        ForbiddenError: If the identity may not edit the post
    """
    existing = get_post_row(post_id)
    if existing is None:
        raise NotFoundError()
    ensure_can_edit(existing['uploader_id'], user)

    with get_db_connection() as conn:
        conn.execute("DELETE FROM posts WHERE id = ?", (post_id,))
        conn.commit()

    garbage_collect_tags()
    logger.info(f"Deleted post {post_id}")

    return remove_files_in_background([
        os.path.join(config.FILES_DIRECTORY, existing['media']),
        os.path.join(config.FILES_DIRECTORY, existing['thumbnail']),
    ])
