import logging
import os
import sys
from typing import Optional


DEV_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
RELEASE_FORMAT = '%(levelname)s %(message)s %(name)s:%(lineno)d'


def is_release_mode() -> bool:
    """Release mode is switched on by a non-empty RELEASE_FILE_SERVER."""
    return bool(os.getenv('RELEASE_FILE_SERVER'))


def _build_formatter(release: bool) -> logging.Formatter:
    if release:
        return logging.Formatter(RELEASE_FORMAT)
    return logging.Formatter(DEV_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    release: Optional[bool] = None
) -> logging.Logger:
    """
    Set up logging configuration for a component.

    Args:
        component_name: Name of the component (e.g., 'fileserver', 'blobstore')
        log_level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO
        release: Use the compact release format. Defaults to RELEASE_FILE_SERVER env var

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
    if release is None:
        release = is_release_mode()

    level = getattr(logging, log_level, logging.INFO)

    logger = logging.getLogger(component_name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(_build_formatter(release))

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Modules under a configured component (``fileserver.*``, ``blobstore.*``)
    inherit its handler through the logger hierarchy.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
