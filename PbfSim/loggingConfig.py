# -- Logging Configuration -- #

'''
Console and file output for the 'PbfSim' logger namespace.

Library modules log through logging.getLogger(__name__) and stay
silent until an application (the runner CLI) calls setupLogging().
Calling it again replaces the previous handlers, closing any open
log file.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def _resetHandlers(logger: logging.Logger) -> None:
    '''Detach and close every handler on the logger.'''
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setupLogging(level: int = logging.INFO, logFile: str | None = None) -> logging.Logger:
    '''
    Configure the package logger.

    Parameters:
    -----------
    level : int
        Logging level (e.g. logging.DEBUG, logging.INFO)
    logFile : str | None
        Optional path to also write the log to (overwritten)

    Returns:
    --------
    logging.Logger : The configured 'PbfSim' logger
    '''
    logger = logging.getLogger('PbfSim')
    logger.setLevel(level)
    _resetHandlers(logger)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if logFile:
        handlers.append(logging.FileHandler(logFile, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug('Logging initialized (level %s).', logging.getLevelName(level))
    return logger
