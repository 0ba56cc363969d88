import logging
import os

LOG_ENV_VAR = "OSU_LB_LOG"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level() -> int:
    return getattr(logging, os.getenv(LOG_ENV_VAR, "INFO").upper(), logging.INFO)


def _handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    level = _level()
    logger.setLevel(level)
    logger.addHandler(_handler(level))
    return logger


def attach_library_logger(name: str = "discord", level: int = logging.INFO) -> logging.Logger:
    """Give a third-party logger (discord.py by default) the bot's log format.

    discord.py installs its own handler unless ``log_handler=None`` is passed
    to ``Client.run``; this takes its place.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(level)
        logger.addHandler(_handler(level))
    return logger
