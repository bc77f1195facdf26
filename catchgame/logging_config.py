"""
Logging Configuration
Sets up the 'catchgame' logger for the desktop host and for scripts
driving CatchEnv. The level comes from the caller, else from the
CATCHGAME_LOG_LEVEL environment variable, else INFO.
"""
import logging
import os
import sys
from typing import Optional, Union

LOG_LEVEL_ENV = "CATCHGAME_LOG_LEVEL"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_level(level: Union[int, str, None] = None) -> int:
    """Turn a level number or name ('debug', 'WARNING') into a logging level."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(level: Union[int, str, None] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the 'catchgame' namespace logger and returns it.

    Args:
        level: Level number or name. Falls back to CATCHGAME_LOG_LEVEL.
        log_file: Optional path; the session log is appended to it.
    """
    logger = logging.getLogger("catchgame")
    logger.setLevel(resolve_level(level))

    # Reconfiguring replaces handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging at %s", logging.getLevelName(logger.level))
    return logger
