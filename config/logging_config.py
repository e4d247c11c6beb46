"""
Centralized logging configuration.

Level, log file and rotation come from config.settings, so LOG_LEVEL /
LOG_FILE in the environment or .env take effect. Pipeline modules log via
logging.getLogger(__name__) under the 'mathsnap' namespace and inherit the
handlers of the 'mathsnap' logger configured at import time.
"""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional, Union

from .constants import LOG_FORMAT
from .settings import settings


def resolve_level(level: Union[str, int, None]) -> int:
    """Level name or number -> logging level; unknown names give INFO"""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level or '').strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logger(
    name: str = None,
    level: Union[str, int, None] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Get or create a configured logger.

    Usage:
        from config.logging_config import setup_logger
        logger = setup_logger(__name__)

    Args:
        name: Logger name. If None, uses 'mathsnap'.
        level: Overrides settings.log_level
        log_file: Overrides settings.log_file

    Returns:
        Configured logging.Logger instance.
    """
    logger = logging.getLogger(name or 'mathsnap')

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(resolve_level(level if level is not None else settings.log_level))
    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    # Rotating file keeps everything the logger lets through
    log_path = Path(log_file or settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=settings.log_max_size_mb * 1024 * 1024,
        backupCount=settings.log_backup_count,
        encoding='utf-8',
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """Alias for setup_logger"""
    return setup_logger(name)


# Root of the package namespace; mathsnap.* module loggers propagate here
logger = setup_logger('mathsnap')
