# =============================================================================
# racf_core/logging/config.py
# Logging setup shared by the console and the user service
# =============================================================================

import logging
import os
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple, Type


LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Environment overrides
LOG_LEVEL_ENV = "RACF_LOG_LEVEL"
LOG_DIR_ENV = "RACF_LOG_DIR"
DEFAULT_LOG_DIR = "logs"

QUIET_LOGGERS = ("urllib3", "httpx", "httpcore", "uvicorn.access")


def _resolve_level(level) -> int:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        return logging.getLevelName(level.strip().upper()) if level.strip() else logging.INFO
    return level


def setup_logging(
    level=None,
    log_to_file: bool = True,
    log_filename: Optional[str] = None,
    log_dir: Optional[Path] = None,
) -> None:
    """
    Configure the root logger for the whole process.

    Args:
        level: int or level name; defaults to $RACF_LOG_LEVEL, then INFO
        log_to_file: Also write to ``<log_dir>/<log_filename>``
        log_filename: Defaults to racf_admin_YYYY-MM-DD.log
        log_dir: Defaults to $RACF_LOG_DIR, then ./logs
    """
    resolved = _resolve_level(level)
    if not isinstance(resolved, int):
        # getLevelName returns "Level X" for unknown names
        resolved = logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_to_file:
        directory = Path(log_dir or os.getenv(LOG_DIR_ENV, DEFAULT_LOG_DIR))
        directory.mkdir(parents=True, exist_ok=True)
        name = log_filename or f"racf_admin_{datetime.now():%Y-%m-%d}.log"
        handlers.append(logging.FileHandler(directory / name, encoding="utf-8"))

    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    for noisy in QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger("racf_core").info(
        f"Logging at {logging.getLevelName(resolved)}"
        + (f", file {handlers[-1].baseFilename}" if log_to_file else "")
    )


def get_logger(name: str) -> logging.Logger:
    """
    Usage:
        from racf_core.logging import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


class LogContext:
    """
    Logs the start, outcome and duration of an operation.

    Exceptions of the ``expected`` types are logged as warnings without a
    traceback; anything else as an error with one. Exceptions always propagate.

    Usage:
        with LogContext(logger, "Deleting 3 users", expected=(RACFAdminError,)) as op:
            ...
        op.elapsed  # seconds
    """

    def __init__(
        self,
        logger: logging.Logger,
        operation: str,
        expected: Tuple[Type[BaseException], ...] = (),
    ):
        self.logger = logger
        self.operation = operation
        self.expected = expected
        self.elapsed = 0.0
        self._started = 0.0

    def __enter__(self):
        self._started = time.perf_counter()
        self.logger.debug(f"{self.operation}: started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self._started

        if exc_val is None:
            self.logger.info(f"{self.operation}: done in {self.elapsed:.2f}s")
        elif isinstance(exc_val, self.expected):
            self.logger.warning(f"{self.operation}: {exc_val} ({self.elapsed:.2f}s)")
        else:
            self.logger.error(
                f"{self.operation}: failed after {self.elapsed:.2f}s",
                exc_info=(exc_type, exc_val, exc_tb),
            )
        return False
