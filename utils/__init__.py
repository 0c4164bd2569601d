"""
Utilities package.

Exports commonly used helpers so routes can import them from one place.
"""

from .logging_config import get_logger, setup_logging
from .errors import (
    TagpoolError,
    NotFoundError,
    BadRequestError,
    ForbiddenError,
    AuthenticationError,
)
from .decorators import api_handler
from .api_responses import (
    success_response,
    error_response,
    not_found_response,
    unauthorized_response,
    forbidden_response,
    validation_error_response,
    server_error_response,
)

__all__ = [
    'get_logger',
    'setup_logging',
    'TagpoolError',
    'NotFoundError',
    'BadRequestError',
    'ForbiddenError',
    'AuthenticationError',
    'api_handler',
    'success_response',
    'error_response',
    'not_found_response',
    'unauthorized_response',
    'forbidden_response',
    'validation_error_response',
    'server_error_response',
]
