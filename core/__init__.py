"""
Core Module

Shared record types and the runtime settings snapshot.
"""

from .models import (
    NEGATIVE_PREFIX,
    RATING_PREFIX,
    Rating,
    MediaType,
    User,
    Tag,
    PostOverview,
    PoolPost,
    PoolMembership,
    PostPoolData,
)

__all__ = [
    'NEGATIVE_PREFIX',
    'RATING_PREFIX',
    'Rating',
    'MediaType',
    'User',
    'Tag',
    'PostOverview',
    'PoolPost',
    'PoolMembership',
    'PostPoolData',
]
