"""
Decorators for API endpoints and service functions.

Consistent error handling and authentication checks for API handlers.
"""

from functools import wraps
from quart import jsonify
from typing import Callable, Any

import config
from utils.errors import (
    AuthenticationError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
)
from utils.api_responses import (
    forbidden_response,
    not_found_response,
    server_error_response,
    unauthorized_response,
    validation_error_response,
)
from utils.logging_config import get_logger

logger = get_logger('API')


def api_handler(require_login: bool = False, require_admin: bool = False, log_errors: bool = True):
    """
    Decorator for API endpoints that handles:
    - Exception catching with proper logging
    - Consistent response format
    - Optional login / admin checks against the session identity

    Args:
        require_login: If True, anonymous requests are rejected with 401
        require_admin: If True, non-admin identities are rejected with 403
        log_errors: If True, logs a traceback for unexpected errors

    Usage:
        @api_blueprint.route('/endpoint', methods=['POST'])
        @api_handler(require_login=True)
        async def my_endpoint():
            # Just the logic, no try/except needed
            return {"data": "value"}  # Auto-wrapped with success=True
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                if require_login or require_admin:
                    from utils.request_helpers import get_current_user
                    user = get_current_user()
                    if user is None:
                        raise AuthenticationError("Login required")
                    if require_admin and not user.is_admin:
                        raise ForbiddenError()

                result = await func(*args, **kwargs)

                # Auto-wrap dict responses
                if isinstance(result, dict):
                    if 'success' not in result:
                        result = {"success": True, **result}
                    return jsonify(result)

                return result

            except (BadRequestError, ValueError) as e:
                if log_errors:
                    logger.debug(f"Bad request in {func.__name__}: {e}")
                return validation_error_response(str(e))
            except AuthenticationError as e:
                return unauthorized_response(str(e))
            except (ForbiddenError, PermissionError) as e:
                return forbidden_response(str(e))
            except (NotFoundError, FileNotFoundError) as e:
                return not_found_response(str(e))
            except Exception as e:
                if log_errors:
                    logger.exception(f"Unhandled error in {func.__name__}: {e}")
                return server_error_response(e, include_traceback=config.FLASK_DEBUG)

        return wrapper
    return decorator

