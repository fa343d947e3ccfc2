"""
Logging setup for the search server process.

The HTTP entry point calls setup_logging() once at import. Library modules
only create module loggers and never configure handlers.

Console lines are short ("INFO: Found duplicate document id 3"). The session
file, when enabled, records every index mutation and query at DEBUG with
timestamps and source locations.
"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Session log files kept on disk, including the one being opened
MAX_SESSION_LOGS = 5

# Size limit of one session log before it rolls over
MAX_LOG_BYTES = 10 * 1024 * 1024

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

# Third-party loggers that flood the console at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx")


def _remove_old_sessions(log_path: Path) -> int:
    """Delete all but the newest MAX_SESSION_LOGS - 1 session logs of this base name"""
    sessions = sorted(log_path.parent.glob(f"{log_path.stem}_*.log"), reverse=True)
    removed = 0
    for old_log in sessions[MAX_SESSION_LOGS - 1:]:
        try:
            old_log.unlink()
            removed += 1
        except FileNotFoundError:
            continue
    return removed


def setup_logging(
    log_file: Optional[str] = "logs/search-server.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Optional[Path]:
    """
    Route root logger output to stdout and, optionally, a per-session file.

    Each call opens a new file named <stem>_<YYYYmmdd_HHMMSS>.log next to
    log_file, so every server start gets its own log.

    Args:
        log_file: Base log path (LOG_FILE); empty or None logs to console only
        console_level: Level for stdout (LOG_LEVEL)
        file_level: Level for the session file

    Returns:
        Path of the session log, or None without file logging
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if not log_file:
        logging.info(f"Logging to console only ({logging.getLevelName(console_level)})")
        return None

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    removed = _remove_old_sessions(log_path)

    session_log = log_path.parent / f"{log_path.stem}_{datetime.now():%Y%m%d_%H%M%S}.log"
    file_handler = RotatingFileHandler(
        session_log,
        maxBytes=MAX_LOG_BYTES,
        backupCount=10,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(file_handler)

    logging.info(
        f"Logging to console ({logging.getLevelName(console_level)}) and {session_log} "
        f"({logging.getLevelName(file_level)}), {removed} old session logs removed"
    )
    return session_log
