"""Utility helpers for the search server"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional


@contextmanager
def log_duration(operation: str, logger: Optional[logging.Logger] = None) -> Iterator[None]:
    """
    Log elapsed wall time of a block on exit (also when the block raises)

    Args:
        operation: Label written before the duration
        logger: Target logger (default: this module's logger)

    Examples:
        >>> with log_duration("Operation time"):
        ...     server.find_top_documents("fluffy cat")
        # INFO: Operation time: 3 ms
    """
    target = logger or logging.getLogger(__name__)
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        target.info(f"{operation}: {elapsed_ms:.0f} ms")
