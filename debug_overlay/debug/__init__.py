"""
Debug Capture Module

Per-request capture of runtime errors and explicit dumps.

Key Components:
- events: Severity codes, categories and the captured event record
- store: Per-request categorized buffer
- formatter: Log line, label and backtrace formatting
- emitter: Error log sinks
- interceptor: The runtime error handler
- dump: Explicit value dumps
- context: Request-scoped context and module-level entry points
- config: Overlay configuration options
"""

from .events import (
    CapturedEvent,
    Category,
    ErrorCode,
    StackFrame,
)
from .store import CaptureStore
from .formatter import (
    collect_frames,
    format_backtrace,
    format_log_line,
    type_name,
)
from .emitter import (
    CallbackSink,
    ErrorLogger,
    LoggingSink,
    NullSink,
    configure_error_log,
)
from .interceptor import (
    CaptureLogHandler,
    ErrorInterceptor,
    classify,
)
from .dump import (
    DumpCapture,
    serialize,
)
from .context import (
    DebugContext,
    capture_dump,
    current_context,
    request_scope,
    trigger_error,
)
from .config import (
    OverlayConfig,
    default_config,
    get_preset,
    PRESETS,
)

__all__ = [
    # Events
    "CapturedEvent",
    "Category",
    "ErrorCode",
    "StackFrame",
    # Store
    "CaptureStore",
    # Formatter
    "collect_frames",
    "format_backtrace",
    "format_log_line",
    "type_name",
    # Emitter
    "CallbackSink",
    "ErrorLogger",
    "LoggingSink",
    "NullSink",
    "configure_error_log",
    # Interceptor
    "CaptureLogHandler",
    "ErrorInterceptor",
    "classify",
    # Dump
    "DumpCapture",
    "serialize",
    # Context
    "DebugContext",
    "capture_dump",
    "current_context",
    "request_scope",
    "trigger_error",
    # Config
    "OverlayConfig",
    "default_config",
    "get_preset",
    "PRESETS",
]
