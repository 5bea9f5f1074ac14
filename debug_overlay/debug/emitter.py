"""
Error Log Sinks.

This module provides the sinks that receive formatted log blocks from
the interceptor. A sink is any ``(str) -> None`` callable, so a plain
``list.append`` works for tests.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, List, Optional, Protocol, runtime_checkable

ERROR_LOG_LOGGER = "debug_overlay.error_log"


@runtime_checkable
class ErrorLogger(Protocol):
    """
    Protocol for error log sinks.

    Sinks receive one fully formatted log block per captured error.
    """

    def __call__(self, log_line: str) -> None:
        ...


class LoggingSink:
    """
    Write log blocks to the logging system.

    This is the default sink. Blocks are logged at ERROR level on the
    ``debug_overlay.error_log`` logger, so any handler attached there
    (see configure_error_log) receives them.

    Example:
        sink = LoggingSink()
        sink("[2024-01-01 00:00:00]\\n[!] ...")
    """

    name = "log"

    def __init__(
        self,
        logger_name: str = ERROR_LOG_LOGGER,
        level: int = logging.ERROR,
    ):
        """
        Initialize the logging sink.

        Args:
            logger_name: Name of the logger to use
            level: Level each block is logged at
        """
        self._logger = logging.getLogger(logger_name)
        self._level = level

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def __call__(self, log_line: str) -> None:
        """Log one block."""
        self._logger.log(self._level, log_line)


class CallbackSink:
    """
    Fan a log block out to several callbacks.

    Failures in one callback are logged and don't stop the others.
    """

    name = "callback"

    def __init__(self, *callbacks: Callable[[str], None]):
        self._callbacks: List[Callable[[str], None]] = list(callbacks)

    def add_callback(self, callback: Callable[[str], None]) -> "CallbackSink":
        self._callbacks.append(callback)
        return self

    def __call__(self, log_line: str) -> None:
        for callback in self._callbacks:
            try:
                callback(log_line)
            except Exception as e:
                logging.getLogger(__name__).warning(
                    "Log callback failed: %s", e
                )


class NullSink:
    """Sink that discards all log blocks."""

    name = "null"

    def __call__(self, log_line: str) -> None:
        pass


def configure_error_log(
    path: str,
    logger_name: str = ERROR_LOG_LOGGER,
) -> Optional[logging.FileHandler]:
    """
    Attach a file handler for the error log.

    Creates the file if it does not exist yet. Calling this twice with
    the same path does not add a second handler.

    Args:
        path: Destination log file
        logger_name: Logger the sink writes to

    Returns:
        The attached handler, or None if one was already attached
    """
    target = os.path.abspath(path)
    log = logging.getLogger(logger_name)

    for handler in log.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return None

    if not os.path.exists(target):
        os.makedirs(os.path.dirname(target), exist_ok=True)
        open(target, "a").close()
        try:
            os.chmod(target, 0o666)
        except OSError as e:
            logging.getLogger(__name__).warning(
                "Could not chmod error log %s: %s", target, e
            )

    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(message)s"))
    log.addHandler(handler)
    return handler
