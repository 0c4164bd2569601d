# services/background_tasks.py
import concurrent.futures
import os
from typing import Iterable

from utils.logging_config import get_logger

logger = get_logger('BackgroundTasks')

# Detached work that must never hold up or fail a request
_cleanup_executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="file_cleanup")


def _remove_files(paths):
    for path in paths:
        try:
            os.remove(path)
        except OSError as e:
            logger.warning(f"Could not remove {path}: {e}")


def remove_files_in_background(paths: Iterable[str]) -> concurrent.futures.Future:
    """
    Delete files on a worker thread and return immediately.

    Failures are logged and otherwise ignored. The returned future is only
    useful to callers (tests) that want to wait for the removal.
    """
    paths = [path for path in paths if path]
    return _cleanup_executor.submit(_remove_files, paths)
