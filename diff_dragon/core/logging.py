"""
Logging configuration for the Diff Dragon review service.

Every record carries `extra.logger_name`, the area passed to `get_logger`
(`reviewer.service`, `github.client`, `ledger.service`, ...). Lifecycle transitions are
logged at DEBUG with the PR key (`owner/repo#number@sha7`); enable them with
`DEBUG=true`. Outside development the sink emits loguru's serialized JSON.
"""

import sys
from typing import Optional

from loguru import logger

from diff_dragon.config import settings


def configure_logging() -> None:
    """Configure loguru sinks for the current environment."""

    logger.remove()

    log_level = "DEBUG" if settings.debug else "INFO"

    if settings.environment == "development":
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{extra[logger_name]}</cyan> | "
                "<blue>{name}</blue>:<blue>{function}</blue>:<blue>{line}</blue> - "
                "<level>{message}</level>"
            ),
            level=log_level,
            colorize=True,
            backtrace=True,
            diagnose=True,
        )
    else:
        # Production logs never carry local variables from tracebacks.
        logger.add(
            sys.stderr,
            format=(
                "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | "
                "{extra[logger_name]} | {name}:{function}:{line} - {message}"
            ),
            level=log_level,
            serialize=True,
            diagnose=False,
        )


logger.configure(extra={"logger_name": "diff-dragon"})
configure_logging()


def get_logger(name: Optional[str] = None):
    """Get a logger instance with optional name binding."""
    if name:
        return logger.bind(logger_name=name)
    return logger
