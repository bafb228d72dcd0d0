"""
Logging Configuration
Sets up the 'cuboard' logger for the command-line tool.

Typed text is written to stdout, so log records always go to stderr (and
optionally to a file) to keep the two streams separable.
"""
import logging
import sys
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR")


def resolve_level(level: Union[int, str]) -> int:
    """Accept logging.DEBUG or "debug"/"DEBUG"."""
    if isinstance(level, int):
        return level
    name = level.upper()
    if name not in LEVEL_NAMES:
        raise ValueError(f"Unknown log level: {level!r}")
    return getattr(logging, name)


def setup_logging(level: Union[int, str] = logging.WARNING, log_file: Optional[str] = None) -> None:
    """
    Configures the logger for the 'cuboard' namespace.

    Args:
        level: Logging level, as a number or one of LEVEL_NAMES.
        log_file: Optional path to save logs to a file.
    """
    level = resolve_level(level)
    logger = logging.getLogger("cuboard")
    logger.setLevel(level)

    # Running main() twice in one interpreter must not duplicate records
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')

    # 1. Console Handler (stderr)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 2. File Handler (Optional)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized at {logging.getLevelName(level)}.")
