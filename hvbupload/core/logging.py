"""Logging utilities for hvbupload modules."""

import logging

ROOT_LOGGER = 'hvbupload'

LOGGERS = (
    ROOT_LOGGER,
    'hvbupload.events',
    'hvbupload.upload',
    'hvbupload.upload.driver',
    'hvbupload.upload.session',
    'hvbupload.upload.encryption',
    'hvbupload.upload.transport',
    'hvbupload.upload.file',
)


def get_logger(component: str) -> logging.Logger:
    """Get the logger of an hvbupload component.

    ``get_logger('upload.session')`` and ``get_logger('hvbupload.upload.session')``
    return the same logger. Loggers propagate to the root logger so that
    basicConfig() is enough to see their output; while the root logger has
    no handlers they default to WARNING.

    Args:
        component: Dotted component name, with or without the package prefix

    Returns:
        Logger instance
    """
    if component != ROOT_LOGGER and not component.startswith(ROOT_LOGGER + '.'):
        component = f"{ROOT_LOGGER}.{component}"

    logger = logging.getLogger(component)
    logger.propagate = True

    if not logging.getLogger().handlers and logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)

    return logger


def setup_logging(level=logging.INFO):
    """
    Configure logging for hvbupload modules.

    Sets every hvbupload logger to the given level; output still goes
    through the root logger's handlers.

    Args:
        level: Logging level (default: logging.INFO)
    """
    for name in LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = True
