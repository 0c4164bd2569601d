"""Tag search: query text -> predicate tree -> paginated post overviews."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import config
from core.models import PostOverview, User
from database import get_db_connection
from utils.logging_config import get_logger

from .pagination import Paginator, page_index
from .predicates import (
    Column,
    Predicate,
    TagCoverage,
    all_of,
    in_set,
    negate,
)
from .sql import lower
from .tokens import SearchTokens, classify_query
from .visibility import visibility_predicate

logger = get_logger('Search')

RATING = Column('post', 'rating')


class JoinKind(str, Enum):
    # INNER when every result must carry at least one tag, LEFT otherwise
    INNER = "INNER"
    LEFT = "LEFT"


@dataclass(frozen=True)
class SearchPlan:
    tokens: SearchTokens
    where: Predicate
    join_kind: JoinKind


def compile_search(query_text: Optional[str], user: Optional[User] = None) -> SearchPlan:
    """
    Compile query text for the given identity.

    Included tags must all be present, excluded tags must all be absent,
    included ratings restrict to that set and excluded ratings remove theirs.
    The visibility predicate is always part of the result.
    """
    tokens = classify_query(query_text)
    clauses = []

    if tokens.include_tags:
        clauses.append(TagCoverage(tokens.include_tags, require_all=True))
    if tokens.exclude_tags:
        clauses.append(negate(TagCoverage(tokens.exclude_tags, require_all=False)))
    if tokens.include_ratings:
        clauses.append(in_set(RATING, tokens.include_ratings))
    if tokens.exclude_ratings:
        clauses.append(negate(in_set(RATING, tokens.exclude_ratings)))
    clauses.append(visibility_predicate(user, 'post'))

    join_kind = JoinKind.INNER if tokens.include_tags else JoinKind.LEFT
    return SearchPlan(tokens=tokens, where=all_of(*clauses), join_kind=join_kind)


def overview_query(where: Predicate, join_kind: JoinKind = JoinKind.LEFT,
                   order_by: str = "p.id DESC") -> Tuple[str, list]:
    """SELECT producing PostOverview rows, tags aggregated per post."""
    where_sql, params = lower(where)
    sql = f"""
        SELECT p.id, p.media, p.title, p.description, p.uploaded_at,
               p.thumbnail, p.rating, p.media_type,
               GROUP_CONCAT(t.name, ' ') AS tags
        FROM posts p
        {join_kind.value} JOIN tag_posts tp ON tp.post_id = p.id
        {join_kind.value} JOIN tags t ON t.id = tp.tag_id
        WHERE {where_sql}
        GROUP BY p.id
        ORDER BY {order_by}
    """
    return sql, params


def search(query_text: Optional[str], user: Optional[User] = None,
           page_size: int = None, page: Optional[int] = 1) -> Tuple[List[PostOverview], int]:
    """
    Run a search and return (overviews for the page, total page count).

    Results are newest first. Page numbers are 1-based; anything below 1
    reads as the first page.
    """
    plan = compile_search(query_text, user)
    sql, params = overview_query(plan.where, plan.join_kind)

    with get_db_connection() as conn:
        paginator = Paginator(
            conn, sql, params, config.Defaults.POSTS_PER_PAGE if page_size is None else page_size)
        rows = paginator.fetch_page(page_index(page))
        page_count = paginator.num_pages()

    logger.debug(f"Search {query_text!r}: page {page} of {page_count}")
    return [PostOverview.from_row(row) for row in rows], page_count


def recent_posts_feed(query_text: Optional[str] = None) -> List[PostOverview]:
    """The newest public posts matching query_text, for the RSS feed."""
    posts, _ = search(query_text, None, page_size=config.Defaults.RSS_PAGE_SIZE, page=1)
    return posts
