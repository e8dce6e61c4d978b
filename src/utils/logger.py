# src/utils/logger.py
import logging
import sys
from typing import Optional


def setup_logger(
    name: str,
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    datefmt: Optional[str] = None,
) -> logging.Logger:
    """
    Set up a named stdout logger for a clinic module.

    Args:
        name: Logger name, e.g. "APPOINTMENT_SERVICE"
        level: Logging level (default: INFO)
        format_string: Custom format string for log messages
        datefmt: Custom date format string

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Handlers are attached once per name
    if logger.handlers:
        return logger

    logger.setLevel(level)

    if format_string is None:
        format_string = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"

    if datefmt is None:
        datefmt = "%Y-%m-%d %H:%M:%S"

    formatter = logging.Formatter(format_string, datefmt=datefmt)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.propagate = False

    return logger


def attach_file_handler(path: str, level: int = logging.INFO) -> logging.Handler:
    """Copy every module logger's records, and the root's, to a log file.

    Module loggers do not propagate, so the handler is added to each logger
    created so far; call this after the application modules are imported.
    """
    file_handler = logging.FileHandler(path)
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] [%(name)s] %(message)s")
    )
    logging.getLogger().addHandler(file_handler)
    for logger in logging.Logger.manager.loggerDict.values():
        if isinstance(logger, logging.Logger) and not logger.propagate:
            logger.addHandler(file_handler)
    return file_handler
