"""Logging setup shared by the desktop app and the scripts.

Usage:
    from sweepmap.logging_config import setup_logging

    # stderr only:
    setup_logging()

    # stderr + logs/<app_name>.log, rotated:
    setup_logging(app_name="sweepmap", debug=True)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3

# relative to the working directory at setup time
LOG_DIR_NAME = "logs"


def setup_logging(
    level: int = logging.INFO,
    log_file: str | None = None,
    fmt: str = DEFAULT_FORMAT,
    *,
    app_name: str | None = None,
    log_dir: str | Path | None = None,
    debug: bool = False,
) -> str | None:
    """Configure the root logger once per entry point.

    Returns the log file path in use, if any.
    """
    if debug:
        level = logging.DEBUG

    resolved_log_file = log_file
    if app_name and not log_file:
        target_dir = Path(log_dir) if log_dir else Path.cwd() / LOG_DIR_NAME
        resolved_log_file = str(target_dir / f"{app_name}.log")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if resolved_log_file:
        Path(resolved_log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                resolved_log_file,
                maxBytes=MAX_BYTES,
                backupCount=BACKUP_COUNT,
            )
        )
    logging.basicConfig(level=level, format=fmt, handlers=handlers, force=True)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    if resolved_log_file:
        logging.getLogger(__name__).info("Logging to %s", resolved_log_file)
    return resolved_log_file
