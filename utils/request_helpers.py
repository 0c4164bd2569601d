"""
Request parsing helpers for API routes.

Provides the acting identity for the current request and consistent parsing
of JSON bodies and page parameters.
"""

from typing import Any, Dict, Optional

from quart import session

from core.models import User
from services.query.pagination import parse_page
from utils.errors import BadRequestError


def get_current_user() -> Optional[User]:
    """
    Resolve the session's user_id to a User, or None when anonymous.

    A session pointing at a deleted account is treated as anonymous.
    """
    from repositories.user_repository import get_user

    user_id = session.get('user_id')
    if user_id is None:
        return None
    return get_user(user_id)


async def require_json_body(request: Any, message: str = "Request body is required") -> Dict[str, Any]:
    """
    Await request JSON body and return it.

    Raises:
        BadRequestError: If body is missing or not a JSON object
    """
    data = await request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        raise BadRequestError(message)
    return data


def get_page_arg(request: Any, name: str = 'page') -> int:
    """1-based page number from the query string (default 1)."""
    return parse_page(request.args.get(name))
