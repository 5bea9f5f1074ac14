"""
Request-Scoped Debug Context.

This module ties the capture store, the error interceptor and the dump
capture together for one request. The active context is tracked in a
ContextVar so the module-level entry points (capture_dump, trigger_error)
can reach it from anywhere in application code.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Callable, Iterator, Optional

from .config import OverlayConfig, default_config
from .dump import DumpCapture
from .emitter import ErrorLogger, configure_error_log
from .events import CapturedEvent, ErrorCode
from .formatter import caller_location
from .interceptor import ErrorInterceptor
from .store import CaptureStore

logger = logging.getLogger(__name__)

_current: ContextVar[Optional["DebugContext"]] = ContextVar(
    "debug_overlay_context", default=None
)


class DebugContext:
    """
    Debug state for a single request.

    Example:
        ctx = DebugContext(error_logger=lines.append)
        ctx.start()

        # During the request
        ctx.dumper.capture(payload)
        ctx.interceptor.handle(ErrorCode.E_USER_NOTICE, "cache miss", __file__, 10)

        # At the end of the request
        ctx.finish()
    """

    def __init__(
        self,
        config: Optional[OverlayConfig] = None,
        error_logger: Optional[ErrorLogger] = None,
        clock: Optional[Callable] = None,
    ):
        """
        Initialize the context.

        Args:
            config: Optional configuration (uses defaults if None)
            error_logger: Sink for formatted error blocks
            clock: Callable returning the current datetime
        """
        self._config = config if config is not None else default_config()
        self._store = CaptureStore()
        self._interceptor = ErrorInterceptor(
            store=self._store,
            error_logger=error_logger,
            clock=clock,
            stack_skip=self._config.stack_skip,
        )
        self._dumper = DumpCapture(
            store=self._store,
            clock=clock,
            default_style=self._config.default_dump_style,
        )

        self._started = False
        self._finished = False

    @property
    def config(self) -> OverlayConfig:
        return self._config

    @property
    def store(self) -> CaptureStore:
        """Get the capture store."""
        return self._store

    @property
    def interceptor(self) -> ErrorInterceptor:
        """Get the error interceptor."""
        return self._interceptor

    @property
    def dumper(self) -> DumpCapture:
        """Get the dump capture."""
        return self._dumper

    @property
    def started(self) -> bool:
        return self._started

    @property
    def finished(self) -> bool:
        return self._finished

    def start(self) -> "DebugContext":
        """
        Start the request: attach the error log and register the interceptor.

        Raises:
            RuntimeError: If the context was already started
        """
        if self._started:
            raise RuntimeError("Context already started")
        self._started = True

        if not self._config.enabled:
            return self

        if self._config.log_file:
            configure_error_log(self._config.log_file)

        if self._config.intercept_errors:
            self.register_interceptor()
        return self

    def register_interceptor(self) -> None:
        """Register the interceptor once; later calls are ignored."""
        if self._interceptor.registered:
            return
        self._interceptor.register(
            capture_warnings=self._config.capture_warnings,
            capture_uncaught=self._config.capture_uncaught,
            capture_logging=self._config.capture_logging,
            report_all=self._config.report_all,
            display_warnings=self._config.display_warnings,
        )

    def finish(self) -> None:
        """End the request: unregister hooks and discard captured events."""
        if self._finished:
            return
        self._finished = True
        self._interceptor.unregister()
        logger.debug("Discarding %d captured events", self._store.total())
        self._store.clear()


def current_context() -> Optional[DebugContext]:
    """Get the context of the active request, if any."""
    return _current.get()


@contextmanager
def request_scope(
    config: Optional[OverlayConfig] = None,
    error_logger: Optional[ErrorLogger] = None,
    clock: Optional[Callable] = None,
) -> Iterator[DebugContext]:
    """
    Context manager for one request.

    Creates a DebugContext, makes it current, and tears it down on exit.

    Example:
        with request_scope() as ctx:
            handle_request()
            html = DebugManager(ctx).on_footer()
    """
    ctx = DebugContext(config=config, error_logger=error_logger, clock=clock)
    token = _current.set(ctx)
    try:
        ctx.start()
        yield ctx
    finally:
        ctx.finish()
        _current.reset(token)


def capture_dump(value: Any, style: Optional[str] = None) -> Optional[CapturedEvent]:
    """
    Dump a value into the active request's capture store.

    Args:
        value: The value to dump
        style: verbose, readable or reconstructable

    Returns:
        The recorded event, or None outside a request
    """
    ctx = _current.get()
    if ctx is None or not ctx.config.enabled:
        logger.debug("capture_dump called without an active debug context")
        return None
    return ctx.dumper.capture(value, style, depth=2)


def trigger_error(message: str, code: int = ErrorCode.E_USER_NOTICE) -> bool:
    """
    Report an error to the active request's interceptor.

    Args:
        message: The error message
        code: Severity code (E_USER_NOTICE by default)

    Returns:
        The interceptor's propagation signal (False outside a request too)
    """
    ctx = _current.get()
    if ctx is None or not ctx.config.enabled:
        logger.debug("trigger_error called without an active debug context")
        return False
    file, line = caller_location(1)
    return ctx.interceptor.handle(code, message, file, line)
