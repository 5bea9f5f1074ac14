from debug_overlay.debug import (
    CaptureStore,
    CapturedEvent,
    Category,
    DebugContext,
    ErrorCode,
    ErrorInterceptor,
    DumpCapture,
    OverlayConfig,
    capture_dump,
    current_context,
    request_scope,
    trigger_error,
)
from debug_overlay.overlay import DebugManager, Host
from debug_overlay.render import PanelRenderer, PanelVisibility

__all__ = [
    "CaptureStore",
    "CapturedEvent",
    "Category",
    "DebugContext",
    "DebugManager",
    "DumpCapture",
    "ErrorCode",
    "ErrorInterceptor",
    "Host",
    "OverlayConfig",
    "PanelRenderer",
    "PanelVisibility",
    "capture_dump",
    "current_context",
    "request_scope",
    "trigger_error",
]
