"""
Query package: search compilation, visibility, predicate lowering and
pagination.
"""

from .pagination import Paginator, page_index, parse_page
from .predicates import TRUE, FALSE, all_of, any_of, negate, evaluate
from .search import SearchPlan, JoinKind, compile_search, search, recent_posts_feed, overview_query
from .sql import lower
from .tokens import SearchTokens, classify_query, partial_token_at
from .visibility import visibility_predicate, can_edit, ensure_can_edit

__all__ = [
    'Paginator',
    'page_index',
    'parse_page',
    'TRUE',
    'FALSE',
    'all_of',
    'any_of',
    'negate',
    'evaluate',
    'SearchPlan',
    'JoinKind',
    'compile_search',
    'search',
    'recent_posts_feed',
    'overview_query',
    'lower',
    'SearchTokens',
    'classify_query',
    'partial_token_at',
    'visibility_predicate',
    'can_edit',
    'ensure_can_edit',
]
