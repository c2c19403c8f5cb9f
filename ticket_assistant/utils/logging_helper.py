import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(
    name: str, level: int | None = None, filename: str | None = None
) -> logging.Logger:
    """
    Module logger for the ticket assistant.

    The level defaults to INFO, or to the value of TICKET_LOG_LEVEL when set
    (e.g. "DEBUG"). Handlers are attached only once per logger name.
    """
    if level is None:
        level = logging.getLevelName(os.getenv("TICKET_LOG_LEVEL", "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.hasHandlers():
        formatter = logging.Formatter(LOG_FORMAT)

        # Use base type for mypy
        handler: logging.Handler
        if filename:
            handler = logging.FileHandler(filename)
        else:
            handler = logging.StreamHandler()

        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def set_level(level: int, prefixes: tuple[str, ...] = ("ticket_assistant",)) -> None:
    """
    Change the level of already created loggers under the given name prefixes.

    Loggers from get_logger carry their own level and handler level, so
    adjusting the root logger alone does not reach them.
    """
    names = [
        name
        for name in logging.root.manager.loggerDict
        if any(name == prefix or name.startswith(f"{prefix}.") for prefix in prefixes)
    ]
    for name in names:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
