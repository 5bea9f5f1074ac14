"""
Runtime Error Interception.

The interceptor is the single handler registered with the runtime's
error-reporting facilities. It classifies every reported error, records
it in the capture store and forwards a formatted block to the error log
sink. It observes only: default propagation always continues.
"""

from __future__ import annotations

import inspect
import logging
import sys
import warnings
from typing import Any, Callable, Optional

from .emitter import ErrorLogger, LoggingSink
from .events import CapturedEvent, Category, ErrorCode, now_timestamp
from .formatter import collect_frames, format_backtrace, format_log_line, type_name
from .store import CaptureStore

logger = logging.getLogger(__name__)

HANDLER_FRAMES = 2

# Modules whose frames sit between a reporting call and the bridges below
WARNINGS_MODULES = frozenset({"warnings", "_py_warnings"})
LOGGING_MODULES = frozenset({"logging"})

WARNING_CODES = (
    (DeprecationWarning, ErrorCode.E_DEPRECATED),
    (PendingDeprecationWarning, ErrorCode.E_DEPRECATED),
    (FutureWarning, ErrorCode.E_USER_DEPRECATED),
    (SyntaxWarning, ErrorCode.E_COMPILE_WARNING),
    (ResourceWarning, ErrorCode.E_NOTICE),
    (UserWarning, ErrorCode.E_USER_WARNING),
)


def classify(label: str) -> Category:
    """
    Pick the bucket for a severity label.

    Substring match: ERROR first, then WARNING, everything else
    (including UNKNOWN) is a notice.
    """
    if "ERROR" in label:
        return Category.ERRORS
    if "WARNING" in label:
        return Category.WARNINGS
    return Category.NOTICES


def warning_code(category: type) -> ErrorCode:
    """Map a warnings category to a severity code."""
    for warning_type, code in WARNING_CODES:
        if isinstance(category, type) and issubclass(category, warning_type):
            return code
    return ErrorCode.E_WARNING


def log_level_code(levelno: int) -> ErrorCode:
    """Map a logging level to a severity code."""
    if levelno >= logging.ERROR:
        return ErrorCode.E_USER_ERROR
    if levelno >= logging.WARNING:
        return ErrorCode.E_USER_WARNING
    return ErrorCode.E_USER_NOTICE


def _text(value: Any) -> str:
    if value is None:
        return ""
    try:
        return str(value)
    except Exception:
        return ""


def _line(value: Any):
    if value is None or value == "":
        return ""
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return ""


def _frames_within(frame, modules) -> int:
    """Count consecutive frames, outward from `frame`, defined in `modules`."""
    count = 0
    try:
        while frame is not None and frame.f_globals.get("__name__") in modules:
            count += 1
            frame = frame.f_back
    finally:
        del frame
    return count


class CaptureLogHandler(logging.Handler):
    """
    Logging handler forwarding records to the interceptor.

    Records emitted by this package's own loggers are skipped, otherwise
    the default sink would feed its own output back in.
    """

    def __init__(self, interceptor: "ErrorInterceptor", level: int = logging.NOTSET):
        super().__init__(level)
        self._interceptor = interceptor

    def emit(self, record: logging.LogRecord) -> None:
        if record.name.split(".")[0] == "debug_overlay":
            return
        try:
            message = record.getMessage()
        except Exception:
            message = _text(record.msg)
        self._interceptor.handle(
            log_level_code(record.levelno),
            message,
            record.pathname,
            record.lineno,
            skip=1 + _frames_within(inspect.currentframe().f_back, LOGGING_MODULES),
        )


class ErrorInterceptor:
    """
    Observer for every error, warning and notice raised in a request.

    Example:
        lines = []
        interceptor = ErrorInterceptor(error_logger=lines.append)
        interceptor.handle(ErrorCode.E_USER_WARNING, "disk almost full", "app.py", 12)

        interceptor.store.counts()[Category.WARNINGS]  # 1
    """

    def __init__(
        self,
        store: Optional[CaptureStore] = None,
        error_logger: Optional[ErrorLogger] = None,
        clock: Optional[Callable] = None,
        stack_skip: int = HANDLER_FRAMES,
    ):
        """
        Initialize the interceptor.

        Args:
            store: Capture store to record into (created lazily if None)
            error_logger: Sink receiving formatted log blocks
            clock: Callable returning the current datetime
            stack_skip: Innermost frames belonging to the handler chain
        """
        self._store = store
        self._error_logger = error_logger if error_logger is not None else LoggingSink()
        self._clock = clock
        self._stack_skip = stack_skip

        self._registered = False
        self._previous_showwarning = None
        self._previous_excepthook = None
        self._warning_filters = None
        self._display_warnings = True
        self._log_handler: Optional[CaptureLogHandler] = None

    @property
    def store(self) -> CaptureStore:
        """Get the capture store, creating it on first use."""
        if self._store is None:
            self._store = CaptureStore()
        return self._store

    @property
    def error_logger(self) -> ErrorLogger:
        return self._error_logger

    @property
    def registered(self) -> bool:
        return self._registered

    def handle(
        self,
        code: Any,
        message: Any,
        file: Any = "",
        line: Any = "",
        skip: int = 0,
    ) -> bool:
        """
        Capture one reported error.

        Args:
            code: Severity code
            message: The raised message
            file: Origin file supplied by the runtime
            line: Origin line supplied by the runtime
            skip: Frames above handle() that belong to the reporting
                machinery and are left out of the backtrace

        Returns:
            False, so the runtime continues its default handling
        """
        try:
            self._capture(code, message, file, line, skip)
        except Exception as e:
            logger.warning("Error interceptor failed: %s", e)
        return False

    def _capture(self, code: Any, message: Any, file: Any, line: Any, skip: int) -> None:
        store = self.store
        error_type = type_name(code)

        try:
            stack = format_backtrace(collect_frames(), self._stack_skip + skip)
        except Exception as e:
            logger.warning("Could not build backtrace: %s", e)
            stack = ""

        event = CapturedEvent(
            timestamp=now_timestamp(self._clock),
            message=_text(message),
            category=classify(error_type),
            file=_text(file),
            line=_line(line),
            type=error_type,
            stack=stack,
        )
        store.record(event.category, event)

        log_message = format_log_line(event)
        try:
            self._error_logger(log_message)
        except Exception as e:
            logger.warning("Error log sink failed: %s", e)

    # Runtime hooks

    def _showwarning(self, message, category, filename, lineno, file=None, line=None):
        skip = 1 + _frames_within(inspect.currentframe().f_back, WARNINGS_MODULES)
        if not self.handle(warning_code(category), message, filename, lineno, skip=skip):
            if self._display_warnings and self._previous_showwarning is not None:
                self._previous_showwarning(message, category, filename, lineno, file, line)

    def _excepthook(self, exc_type, exc_value, exc_tb):
        file, line = "", ""
        tb = exc_tb
        while tb is not None:
            file, line = tb.tb_frame.f_code.co_filename, tb.tb_lineno
            tb = tb.tb_next
        message = f"Uncaught {getattr(exc_type, '__name__', exc_type)}: {exc_value}"
        self.handle(ErrorCode.E_ERROR, message, file, line, skip=1)
        if self._previous_excepthook is not None:
            self._previous_excepthook(exc_type, exc_value, exc_tb)

    def register(
        self,
        capture_warnings: bool = True,
        capture_uncaught: bool = True,
        capture_logging: bool = False,
        report_all: bool = True,
        display_warnings: bool = True,
    ) -> "ErrorInterceptor":
        """
        Register this interceptor with the runtime's error reporting.

        Args:
            capture_warnings: Hook warnings.showwarning
            capture_uncaught: Hook sys.excepthook
            capture_logging: Attach a handler to the root logger
            report_all: Report every warning while registered, bypassing the
                runtime filters (ignored categories, once per location)
            display_warnings: Pass captured warnings on to the previous
                showwarning for the usual stderr output

        Returns:
            Self for chaining

        Raises:
            RuntimeError: If already registered
        """
        if self._registered:
            raise RuntimeError("Interceptor already registered")
        self._registered = True

        if report_all:
            self._warning_filters = warnings.catch_warnings()
            self._warning_filters.__enter__()
            warnings.simplefilter("always")

        self._display_warnings = display_warnings

        if capture_warnings:
            self._previous_showwarning = warnings.showwarning
            warnings.showwarning = self._showwarning

        if capture_uncaught:
            self._previous_excepthook = sys.excepthook
            sys.excepthook = self._excepthook

        if capture_logging:
            self._log_handler = CaptureLogHandler(self)
            logging.getLogger().addHandler(self._log_handler)

        logger.debug(
            "Interceptor registered (warnings=%s, uncaught=%s, logging=%s, report_all=%s)",
            capture_warnings, capture_uncaught, capture_logging, report_all,
        )
        return self

    def unregister(self) -> None:
        """Restore every hook replaced by register()."""
        if not self._registered:
            return

        if self._previous_showwarning is not None:
            warnings.showwarning = self._previous_showwarning
            self._previous_showwarning = None

        if self._previous_excepthook is not None:
            sys.excepthook = self._previous_excepthook
            self._previous_excepthook = None

        if self._log_handler is not None:
            logging.getLogger().removeHandler(self._log_handler)
            self._log_handler = None

        if self._warning_filters is not None:
            self._warning_filters.__exit__(None, None, None)
            self._warning_filters = None
        self._display_warnings = True

        self._registered = False
        logger.debug("Interceptor unregistered")
