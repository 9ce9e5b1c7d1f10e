"""Logger configuration for the workload reporting engine.

Level and file sink default to LOG_LEVEL / LOG_FILE from settings. The data
source opens one database session per query, so session lifecycle debug lines
are capped at INFO unless overridden.
"""

import sys
from pathlib import Path

from loguru import logger

from workload_report.config.settings import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# Minimum level per module, applied on top of the sink level
MODULE_LEVELS: dict[str, str] = {
    "workload_report.db.session": "INFO",
}


def setup_logger(
    level: str | None = None,
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    module_levels: dict[str, str] | None = None,
) -> None:
    """Configure loguru with a console sink and an optional rotating file sink.

    Args:
        level: Logging level; defaults to settings.log_level
        log_file: Log file path; defaults to settings.log_file (no file sink if unset)
        rotation: Log rotation size (e.g., "10 MB", "1 day")
        retention: Log retention period (e.g., "7 days", "1 month")
        module_levels: Per-module minimum levels; defaults to MODULE_LEVELS
    """
    level = level or settings.log_level
    log_file = log_file or settings.log_file
    module_filter = {"": level, **(MODULE_LEVELS if module_levels is None else module_levels)}

    logger.remove()

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=level,
        filter=module_filter,
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            filter=module_filter,
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=True,
        )

    logger.info(f"Logger initialized with level={level}, log_file={log_file or '-'}")
