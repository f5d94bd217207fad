import sys

from loguru import logger

from . import config


def setup_logging():
    """
    Configure the loguru sinks used by the whole service.

    A stderr sink is always installed; a rotating file sink is added
    when ``LOG_FILE`` is set.
    """
    logger.remove()
    logger.add(sys.stderr, level=config.LOG_LEVEL)
    if config.LOG_FILE:
        logger.add(config.LOG_FILE, level=config.LOG_LEVEL, rotation="10 MB", compression="zip")
    return logger
