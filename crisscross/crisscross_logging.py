"""This provides logging functionality for crisscross.

It is modeled on the default `logging approach that comes with Python <https://docs.python.org/library/logging.html>`_.
All loggers hang below a single package root logger, which only carries a ``NullHandler``
until an application calls :func:`log_to_stderr` or attaches its own handlers.
"""

import inspect
import logging
from functools import wraps
from logging import DEBUG, INFO

__all__ = [
    "DEBUG",
    "DEFAULT_LEVEL",
    "INFO",
    "LOGGER_NAME",
    "create_module_logger",
    "function_logger",
    "get_module_logger",
    "get_rootlogger",
    "log_to_stderr",
]

LOGGER_NAME = "CRISSCROSS"
DEFAULT_LEVEL = DEBUG

_rootlogger = logging.getLogger(LOGGER_NAME)
_rootlogger.addHandler(logging.NullHandler())
_module_loggers: dict[str, logging.Logger] = {}


def create_module_logger(name: str | None = None) -> logging.Logger:
    """Helper function for creating a module logger.

    Args:
        name (str): The name to be given to the logger. If the name is None, the name defaults to the name of the module.

    """
    if name is None:
        frm = inspect.stack()[1]
        mod = inspect.getmodule(frm[0])
        name = mod.__name__
    logger = logging.getLogger(f"{LOGGER_NAME}.{name}")

    _module_loggers[name] = logger
    return logger


def get_module_logger(name: str) -> logging.Logger:
    """Helper function for getting the module logger.

    Args:
        name (str): The name of the module in which the method being decorated is located

    """
    try:
        logger = _module_loggers[name]
    except KeyError:
        logger = create_module_logger(name)

    return logger


def get_rootlogger() -> logging.Logger:
    """Return the package root logger."""
    return _rootlogger


class CrissCrossColorFormatter(logging.Formatter):
    """Custom formatter for color based formatting."""

    grey = "\x1b[38;20m"
    green = "\x1b[32m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"
    fmt = "[%(name)s %(levelname)s] %(message)s [%(module)s.%(funcName)s:%(lineno)d]"

    FORMATS = {
        logging.DEBUG: grey + fmt + reset,
        logging.INFO: green + fmt + reset,
        logging.WARNING: yellow + fmt + reset,
        logging.ERROR: red + fmt + reset,
        logging.CRITICAL: bold_red + fmt + reset,
    }

    def format(self, record):
        """Format record."""
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


def function_logger(name: str):
    """Decorator for adding logging to a function.

    Args:
        name (str): The name of the module in which the function being decorated is located

    """
    logger = get_module_logger(name)

    def real_decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger.debug(f"calling {func.__name__} with {args} and {kwargs}")
            return func(*args, **kwargs)

        return wrapper

    return real_decorator


def log_to_stderr(level: int | None = None, pass_root_logger_level: bool = False):
    """Turn on logging and add a handler which prints to stderr.

    Args:
        level: minimum level of the messages that will be logged
        pass_root_logger_level: whether records also propagate to the Python root logger

    """
    if not level:
        level = DEFAULT_LEVEL

    logger = get_rootlogger()
    logger.setLevel(level)

    # avoid creation of multiple stream handlers for logging to console
    for entry in logger.handlers:
        if isinstance(entry, logging.StreamHandler) and isinstance(
            entry.formatter, CrissCrossColorFormatter
        ):
            return logger

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(CrissCrossColorFormatter())
    logger.addHandler(handler)
    logger.propagate = pass_root_logger_level

    return logger
