"""
Helpers!
"""

import abc
import logging
from time import time
import typing

from . import const as ec

if typing.TYPE_CHECKING:
    from typing import Any, Final, NotRequired, TypedDict, Unpack


def getLogger(name: str) -> "RateLimitedLogger":
    """
    logging.getLogger returning the logger with its class extended
    by RateLimitedLogger so that log calls accept 'timeout='
    """
    logger = logging.getLogger(name)
    logger_class = logger.__class__
    if not issubclass(logger_class, RateLimitedLogger):
        if (limited_class := RateLimitedLogger.subclasses.get(logger_class)) is None:
            limited_class = RateLimitedLogger.subclasses[logger_class] = type(
                f"RateLimited{logger_class.__name__}",
                (RateLimitedLogger, logger_class),
                {},
            )
        logger.__class__ = limited_class
    return logger  # type: ignore


class RateLimitedLogger(logging.Logger if typing.TYPE_CHECKING else object):
    """
    Mixin grafted on our loggers class. Passing 'timeout=<seconds>' to a log
    call emits that (formatted) message at most once per timeout; 'timeout=None'
    applies default_timeout. Gateways keep polling regardless of our errors so a
    broken catalog would otherwise log the same failure on every request.
    """

    default_timeout = 300

    subclasses: "typing.ClassVar[dict[type, type]]" = {}
    """logger classes already extended, keyed by their base"""

    deadlines: "typing.ClassVar[dict[tuple[str, int, str], float]]" = {}
    """(logger name, level, message) -> epoch until which repeats are dropped"""

    def _log(self, level, msg, args, **kwargs):
        if "timeout" in kwargs:
            timeout = kwargs.pop("timeout")
            if timeout is None:
                timeout = self.default_timeout
            epoch = time()
            deadlines = RateLimitedLogger.deadlines
            for key in [key for key, until in deadlines.items() if until <= epoch]:
                del deadlines[key]
            key = (self.name, level, str(msg) % args if args else str(msg))
            if key in deadlines:
                if self.isEnabledFor(ec.CONF_LOGGING_VERBOSE):
                    super()._log(
                        ec.CONF_LOGGING_VERBOSE, "suppressed: %s", (key[2],), **kwargs
                    )
                return
            deadlines[key] = epoch + timeout

        super()._log(level, msg, args, **kwargs)


LOGGER = getLogger(__name__[:-8])  # get base package name for logging
"""Root ecowitt_cloud logger"""


def set_logging_level(level: int | str, /):
    """Applies a level (either numeric or one of CONF_LOGGING_LEVEL_OPTIONS names)
    to the root package logger."""
    if isinstance(level, str):
        for _level, _name in ec.CONF_LOGGING_LEVEL_OPTIONS.items():
            if _name == level.lower():
                level = _level
                break
        else:
            raise ValueError(f"Unknown logging level '{level}'")
    LOGGER.setLevel(level)


class Loggable(abc.ABC):
    """
    Helper base class for logging instance name/id related info.
    Derived classes can customize this in different flavours:
    - basic way is to override 'logtag' to provide a custom name when
    logging.
    - custom way by overriding 'log' we can intercept log messages.
    """

    if typing.TYPE_CHECKING:
        id: Final[Any]
        logger: "Loggable | logging.Logger"

        class Args(TypedDict):
            logger: NotRequired["Loggable | logging.Logger"]

    VERBOSE = ec.CONF_LOGGING_VERBOSE
    DEBUG = ec.CONF_LOGGING_DEBUG
    INFO = ec.CONF_LOGGING_INFO
    WARNING = ec.CONF_LOGGING_WARNING
    CRITICAL = ec.CONF_LOGGING_CRITICAL

    __slots__ = ("id", "logtag", "logger")

    def __init__(self, id, **kwargs: "Unpack[Args]"):
        self.id = id
        self.logger = kwargs.get("logger", LOGGER)
        self.configure_logger()
        self.log(self.DEBUG, "init")

    def __repr__(self):
        return f"{self.__class__.__name__}({self.id})"

    def configure_logger(self):
        self.logtag = f"{self.__class__.__name__}({self.id})"

    def isEnabledFor(self, level: int):
        return self.logger.isEnabledFor(level)

    def log(self, level: int, msg: str, *args, **kwargs):
        self.logger.log(level, f"{self.logtag}: {msg}", *args, **kwargs)

    def log_exception(
        self, level: int, exception: Exception, msg: str, *args, **kwargs
    ):
        self.log(
            level,
            f"{exception.__class__.__name__}({str(exception)}) in {msg}",
            *args,
            **kwargs,
        )

