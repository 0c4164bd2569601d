"""
Logging setup shared by the app, the management commands and the tests.

Every module logs through get_logger(); nothing prints except manage.py
command output.
"""

import logging
import sys

ROOT_LOGGER_NAME = 'tagpool'

DEFAULT_FORMAT = '%(asctime)s [%(name)s] %(levelname)s: %(message)s'

_loggers = {}


def setup_logging(level: str = None, log_file: str = None):
    """
    Attach handlers to the 'tagpool' logger. Call once at startup.

    Calling it again replaces the handlers instead of stacking them.

    Args:
        level: DEBUG, INFO, WARNING or ERROR (unknown names fall back to INFO)
        log_file: Optional path that receives the same records as stdout
    """
    log_level = getattr(logging, (level or 'INFO').upper(), logging.INFO)
    formatter = logging.Formatter(DEFAULT_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.setLevel(log_level)
    app_logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """
    Logger for one component, named 'tagpool.<name>'.

    Usage:
        logger = get_logger('PoolService')
        logger.info(f"Moved post {post_id} to {position}")
    """
    if name not in _loggers:
        _loggers[name] = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return _loggers[name]
