"""
Validation helpers for request payloads.

Every helper raises BadRequestError (a ValueError), which api_handler turns
into a 400 response.
"""

from typing import Any, List, Optional

from utils.errors import BadRequestError


def validate_string(value: Any, param_name: str = "parameter", allow_empty: bool = False) -> str:
    """
    Validate a string parameter and return it stripped.

    Raises:
        BadRequestError: If missing, not a string, or empty when not allowed
    """
    if value is None:
        if allow_empty:
            return ""
        raise BadRequestError(f"{param_name} is required")

    if not isinstance(value, str):
        raise BadRequestError(f"{param_name} must be a string")

    value = value.strip()
    if not allow_empty and not value:
        raise BadRequestError(f"{param_name} cannot be empty")
    return value


def validate_enum(value: Any, param_name: str, allowed_values: List[str]) -> str:
    if not isinstance(value, str) or value not in allowed_values:
        raise BadRequestError(f"{param_name} must be one of: {', '.join(allowed_values)}")
    return value


def validate_integer(value: Any, param_name: str = "parameter",
                     min_value: Optional[int] = None) -> int:
    """
    Validate that a value is an integer, optionally bounded below.

    Booleans are rejected even though Python treats them as integers.
    """
    if value is None or isinstance(value, bool):
        raise BadRequestError(f"{param_name} must be an integer")

    try:
        result = int(value)
    except (ValueError, TypeError) as e:
        raise BadRequestError(f"{param_name} must be an integer") from e

    if min_value is not None and result < min_value:
        raise BadRequestError(f"{param_name} must be at least {min_value}")
    return result


def validate_boolean(value: Any, param_name: str = "parameter", default: bool = False) -> bool:
    """Accept JSON booleans and the usual form spellings ('true', 'on', '1')."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ('true', 'on', '1', 'yes'):
        return True
    if isinstance(value, str) and value.strip().lower() in ('false', 'off', '0', 'no', ''):
        return False
    if isinstance(value, int):
        return value != 0
    raise BadRequestError(f"{param_name} must be a boolean")


def validate_string_list(value: Any, param_name: str = "parameter") -> List[str]:
    """A list of strings; a single string is treated as a one-item list."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise BadRequestError(f"{param_name} must be a list of strings")
    return value
