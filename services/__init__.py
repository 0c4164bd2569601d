"""
Services package for TagPool.

Business logic on top of the repositories:
- query/: search compilation, visibility and pagination
- pool_service / pool_positions: pool ordering and membership
- tag_service: autocompletion and bulk tag maintenance
- feed_service: RSS rendering
- background_tasks: detached file cleanup

Service modules are imported directly where needed, e.g.
`from services import pool_service`.
"""

__all__ = [
    'background_tasks',
    'feed_service',
    'pool_positions',
    'pool_service',
    'tag_service',
]
