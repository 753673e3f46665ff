"""Loguru setup for the maintenance backend.

Application modules log through loguru directly. The libraries the service
runs on (uvicorn, SQLAlchemy, APScheduler) log through the standard logging
module; their records are forwarded into the same loguru sinks so that a
scheduled generation run and the request that triggered it share one stream.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

# Library loggers forwarded to loguru, with the minimum level kept for each
FORWARDED_LOGGERS: dict[str, str] = {
    "uvicorn": "INFO",
    "uvicorn.access": "WARNING",
    "uvicorn.error": "INFO",
    "apscheduler": "INFO",
    "sqlalchemy.engine": "WARNING",
}


class _LoguruForwarder(logging.Handler):
    """Re-emit standard logging records through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging internals so loguru reports the caller's location
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _forward_library_logs() -> None:
    handler = _LoguruForwarder()
    for name, level in FORWARDED_LOGGERS.items():
        library_logger = logging.getLogger(name)
        library_logger.handlers = [handler]
        library_logger.setLevel(level)
        library_logger.propagate = False


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Configure loguru sinks and forward library logs into them.

    Args:
        level: Minimum level for application logs (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path; rotated and compressed when set
        rotation: Size or age that triggers rotation (e.g., "10 MB", "1 day")
        retention: How long rotated files are kept (e.g., "7 days")
    """
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            enqueue=True,
        )

    _forward_library_logs()
    logger.info(f"Logger initialized with level={level} file={log_file or '-'}")
