"""
Pool service: ordered membership on top of the pool repository.

Ordering uses fractional positions (see services.pool_positions): appends
take the next whole number, moves rewrite a single member's position.
"""

from typing import List, Optional, Tuple

import config
from core.models import PoolMembership, PoolPost, PostPoolData, User
from database import get_db_connection, transaction
from repositories import pool_repository
from services.pool_positions import next_append_position, position_for_move, respaced_positions
from services.query.pagination import Paginator, page_index
from services.query.predicates import Column, Compare, all_of
from services.query.sql import lower
from services.query.visibility import can_edit, ensure_can_edit, visibility_predicate
from utils.errors import NotFoundError
from utils.logging_config import get_logger

logger = get_logger('PoolService')

__all__ = [
    'can_edit',
    'get_pool',
    'list_pools',
    'pool_contents',
    'append_to_pool',
    'move_within_pool',
    'remove_pool_post',
    'get_pool_data_for_post',
    'respace_pool_positions',
    'require_editable_pool',
]


def get_pool(pool_id: int, user: Optional[User] = None) -> dict:
    """Pool the identity may see, with an is_editable flag for that identity."""
    pool = pool_repository.get_visible_pool(pool_id, user)
    if pool is None:
        raise NotFoundError("Pool not found")
    pool['is_public'] = bool(pool['is_public'])
    pool['is_editable'] = can_edit(pool['uploader_id'], user)
    return pool


def require_editable_pool(pool_id: int, user: Optional[User]) -> dict:
    """Existing pool the identity may edit.

    Raises:
        NotFoundError: If the pool does not exist
        ForbiddenError: If the identity may not edit it
    """
    pool = pool_repository.get_pool_row(pool_id)
    if pool is None:
        raise NotFoundError("Pool not found")
    ensure_can_edit(pool['uploader_id'], user)
    return pool


def list_pools(user: Optional[User] = None, page: Optional[int] = 1,
               page_size: int = None) -> Tuple[List[dict], int]:
    """Visible pools for one page, plus the page count."""
    sql, params = pool_repository.visible_pools_query(user)
    with get_db_connection() as conn:
        paginator = Paginator(
            conn, sql, params, config.Defaults.POOLS_PER_PAGE if page_size is None else page_size)
        rows = paginator.fetch_page(page_index(page))
        page_count = paginator.num_pages()

    pools = []
    for row in rows:
        pool = dict(row)
        pool['is_public'] = bool(pool['is_public'])
        pools.append(pool)
    return pools, page_count


def pool_contents(pool_id: int, user: Optional[User] = None,
                  page: Optional[int] = None, page_size: Optional[int] = None) -> List[PoolPost]:
    """
    Members of a pool the identity may see, ascending by position.

    Without page_size the whole pool is returned; otherwise just that page.

    Raises:
        NotFoundError: If the pool does not exist or is not visible
    """
    get_pool(pool_id, user)

    if page_size is None:
        return pool_repository.get_pool_posts(pool_id, user)

    sql, params = pool_repository.pool_posts_query(pool_id, user)
    with get_db_connection() as conn:
        rows = Paginator(conn, sql, params, page_size).fetch_page(page_index(page))
    return [PoolPost.from_row(row) for row in rows]


def append_to_pool(pool_id: int, post_id: int, user: Optional[User] = None) -> PoolMembership:
    """
    Add a post at the end of a pool.

    The position is one past the whole part of the current maximum, so a
    pool whose last member sits at 2.5 gets 3.0. Adding a post that is
    already a member returns the existing membership unchanged.

    Raises:
        NotFoundError: If the pool does not exist or the post is not visible
    """
    if pool_repository.get_pool_row(pool_id) is None:
        raise NotFoundError("Pool not found")

    where_sql, params = lower(all_of(Compare(Column('post', 'id'), '=', post_id), visibility_predicate(user)))
    with get_db_connection() as conn:
        if conn.execute(f"SELECT p.id FROM posts p WHERE {where_sql}", params).fetchone() is None:
            raise NotFoundError("Post not found")

        with transaction(conn):
            existing = pool_repository.get_membership(conn, pool_id, post_id)
            if existing is not None:
                return existing
            position = next_append_position(pool_repository.get_max_position(conn, pool_id))
            membership = pool_repository.insert_membership(conn, pool_id, post_id, position)

    logger.info(f"Appended post {post_id} to pool {pool_id} at {position}")
    return membership


def move_within_pool(pool_id: int, source_index: int, destination_index: int,
                     user: Optional[User] = None) -> float:
    """
    Move the member at source_index so it ends up at destination_index.

    Indices refer to the pool as the identity sees it. Exactly one row is
    rewritten; moving a member onto its own index changes nothing.

    Returns:
        float: The member's position after the move

    Raises:
        NotFoundError: If the pool is not visible or an index is out of range
    """
    members = pool_contents(pool_id, user)
    new_position = position_for_move([member.position for member in members], source_index, destination_index)

    moved = members[source_index]
    if new_position != moved.position:
        pool_repository.update_pool_post_position(moved.pool_post_id, new_position)
        logger.info(f"Moved post {moved.id} in pool {pool_id} from index {source_index} "
                    f"to {destination_index} (position {new_position})")
    return new_position


def remove_pool_post(pool_post_id: int, user: Optional[User]) -> PoolMembership:
    """Remove one membership row; the post itself is untouched.

    Raises:
        NotFoundError: If the membership does not exist
        ForbiddenError: If the identity may not edit the pool
    """
    membership = pool_repository.get_pool_post(pool_post_id)
    if membership is None:
        raise NotFoundError("Pool entry not found")
    require_editable_pool(membership.pool_id, user)
    pool_repository.delete_pool_post(pool_post_id)
    return membership


def get_pool_data_for_post(post_id: int, user: Optional[User] = None) -> List[PostPoolData]:
    """For each visible pool containing the post, its visible neighbours in that pool."""
    results = []
    for pool in pool_repository.get_pools_containing_post(post_id, user):
        members = pool_repository.get_pool_posts(pool['id'], user)
        member_ids = [member.id for member in members]
        if post_id not in member_ids:
            continue
        index = member_ids.index(post_id)
        results.append(PostPoolData(
            id=pool['id'],
            name=pool['name'],
            previous_post_id=member_ids[index - 1] if index > 0 else None,
            next_post_id=member_ids[index + 1] if index + 1 < len(member_ids) else None,
        ))
    return results


def respace_pool_positions(pool_id: int) -> int:
    """
    Rewrite a pool's positions to 1.0, 2.0, ... keeping the current order.

    Repeated midpoint moves shrink the gaps between positions; this restores
    them. It is a maintenance pass and never runs as part of a move.

    Returns:
        int: Number of members rewritten
    """
    if pool_repository.get_pool_row(pool_id) is None:
        raise NotFoundError("Pool not found")

    members = pool_repository.get_pool_posts(pool_id, None, all_members=True)
    positions = respaced_positions(len(members))
    pool_repository.rewrite_positions(
        pool_id, [(position, member.pool_post_id) for position, member in zip(positions, members)]
    )
    logger.info(f"Respaced {len(members)} positions in pool {pool_id}")
    return len(members)
