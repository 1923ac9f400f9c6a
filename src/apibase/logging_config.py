import logging
import sys
from pathlib import Path
from typing import Optional, Union

from .models.config import APIConfig

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: Optional[str] = None,
    log_file: Union[str, Path, None] = None,
    format_string: Optional[str] = None,
    force: bool = False,
    config: Optional[APIConfig] = None,
) -> logging.Logger:
    """
    Configure the "apibase" logger.

    ``config`` supplies ``log_level`` and ``log_file`` for any argument left
    as None. Without either, the level is INFO and output goes to stdout only.
    Records from ``apibase.*`` modules do not reach the root logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Also write records to this file
        format_string: Format for both handlers
        force: Replace handlers installed by an earlier call
        config: Settings to read the level and log file from

    Returns:
        The "apibase" logger

    Example:
        setup_logging(config=APIConfig.from_yaml_file("apibase.yaml"))
    """
    if config is not None:
        level = level or config.log_level
        log_file = log_file or config.log_file

    logger = logging.getLogger("apibase")
    logger.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))
    logger.propagate = False

    if logger.handlers and not force:
        return logger

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(logger.level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
