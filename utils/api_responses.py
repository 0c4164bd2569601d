"""
JSON response builders shared by api_handler and the routes.

Every API body is an object with a boolean "success"; failures add "error".
"""

import traceback
from typing import Any, Dict, Optional, Tuple

from quart import jsonify, Response


def success_response(data: Optional[Dict[str, Any]] = None, message: Optional[str] = None) -> Response:
    """
    Build a 200 response.

    Example:
        return success_response({"pool_id": 3}, "Pool created")
        # {"success": true, "message": "Pool created", "pool_id": 3}
    """
    body = {"success": True}
    if message:
        body["message"] = message
    if data:
        body.update(data)
    return jsonify(body)


def error_response(error: str, status_code: int = 400,
                   data: Optional[Dict[str, Any]] = None) -> Tuple[Response, int]:
    body = {"success": False, "error": str(error)}
    if data:
        body.update(data)
    return jsonify(body), status_code


def validation_error_response(message: str, field: Optional[str] = None) -> Tuple[Response, int]:
    return error_response(message, 400, {"field": field} if field else None)


def unauthorized_response(message: str = "Authentication required") -> Tuple[Response, int]:
    return error_response(message, 401)


def forbidden_response(message: str = "Not allowed") -> Tuple[Response, int]:
    return error_response(message, 403)


def not_found_response(message: str = "Not found") -> Tuple[Response, int]:
    return error_response(message, 404)


def server_error_response(error: Exception, include_traceback: bool = False) -> Tuple[Response, int]:
    """500 response for an unexpected exception; the traceback is only sent in debug mode."""
    data = {"traceback": traceback.format_exc()} if include_traceback else None
    return error_response(str(error), 500, data)
