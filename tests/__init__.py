"""
TagPool Test Suite

Test organization:
- test_tokens.py, test_predicates.py: query classification and predicate trees
- test_search.py: search and pagination against SQLite
- test_pool_positions.py, test_pool_service.py: pool ordering
- test_tag_repository.py, test_tag_service.py: tag lifecycle and autocomplete
- test_post_repository.py: post detail edits and deletion
- test_api.py: endpoint tests through the Quart test client
- conftest.py: Shared fixtures and test utilities
"""
