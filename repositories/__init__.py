"""
Repository modules for the data access layer.

Each module owns the SQL for one table family; services and routes import
the module they need, e.g. `from repositories import pool_repository`.
"""

from .tag_repository import (
    normalize_tag_name,
    parse_tag_input,
    upsert_tags,
    get_tag,
    get_tags_for_post,
    find_tags_by_prefix,
    replace_post_tags,
    rename_or_merge_tag,
    garbage_collect_tags,
)

from .user_repository import (
    create_user,
    get_user,
    authenticate,
)

__all__ = [
    # Tag repository
    'normalize_tag_name',
    'parse_tag_input',
    'upsert_tags',
    'get_tag',
    'get_tags_for_post',
    'find_tags_by_prefix',
    'replace_post_tags',
    'rename_or_merge_tag',
    'garbage_collect_tags',
    # User repository
    'create_user',
    'get_user',
    'authenticate',
]
