"""
Host Lifecycle Integration.

DebugManager holds the callback bodies a host invokes at its lifecycle
points: startup, page-head render and page-footer render. The host owns
the hook mechanism; init() only hands the callbacks over.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol, runtime_checkable

from .debug.config import OverlayConfig
from .debug.context import DebugContext, current_context
from .render.panels import PanelRenderer
from .util.const import (
    FILTER_SHOW_INDICATOR,
    HOOK_ADMIN_FOOTER,
    HOOK_ADMIN_HEAD,
    HOOK_FOOTER,
    HOOK_HEAD,
    HOOK_STARTUP,
    PRIORITY_DEFAULT,
    PRIORITY_EARLY,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class Host(Protocol):
    """The slice of the host application the overlay talks to."""

    def add_action(self, hook: str, callback: Callable, priority: int = PRIORITY_DEFAULT) -> None:
        ...

    def add_filter(self, hook: str, callback: Callable, priority: int = PRIORITY_DEFAULT) -> None:
        ...

    def is_admin(self) -> bool:
        ...

    def is_user_logged_in(self) -> bool:
        ...


class DebugManager:
    """
    Lifecycle callbacks for the debug overlay.

    The context defaults to the active request scope, looked up each time
    a callback runs.

    Example:
        manager = DebugManager()
        manager.init(host)

        with request_scope():
            host.run_request()  # host fires init, head and footer
    """

    def __init__(
        self,
        context: Optional[DebugContext] = None,
        renderer: Optional[PanelRenderer] = None,
        config: Optional[OverlayConfig] = None,
    ):
        self._context = context
        self._renderer = renderer or PanelRenderer()
        self._config = config
        self._host: Optional[Host] = None

    @property
    def context(self) -> Optional[DebugContext]:
        return self._context if self._context is not None else current_context()

    @property
    def config(self) -> OverlayConfig:
        if self._config is not None:
            return self._config
        ctx = self.context
        return ctx.config if ctx is not None else OverlayConfig()

    @property
    def renderer(self) -> PanelRenderer:
        return self._renderer

    def init(self, host: Host) -> "DebugManager":
        """
        Hand the lifecycle callbacks to the host.

        Args:
            host: Host application exposing add_action/add_filter

        Returns:
            Self for chaining
        """
        self._host = host
        host.add_action(HOOK_STARTUP, self.on_startup, PRIORITY_EARLY)
        host.add_action(HOOK_STARTUP, self.show_indicator_for_debug, PRIORITY_DEFAULT)
        host.add_action(HOOK_ADMIN_HEAD, self.on_head, PRIORITY_DEFAULT)
        host.add_action(HOOK_HEAD, self.on_head, PRIORITY_DEFAULT)
        if host.is_admin():
            host.add_action(HOOK_ADMIN_FOOTER, self.on_footer, PRIORITY_DEFAULT)
        else:
            host.add_action(HOOK_FOOTER, self.on_footer, PRIORITY_DEFAULT)
        return self

    def on_startup(self) -> None:
        """Register the error interceptor for the active request."""
        ctx = self.context
        if ctx is None:
            logger.debug("Startup hook fired without an active debug context")
            return
        if not ctx.config.enabled or not ctx.config.intercept_errors:
            return
        ctx.register_interceptor()

    def show_indicator_for_debug(self) -> None:
        """Force the indicator bar on for logged-in users."""
        host = self._host
        if host is None or not self.config.force_indicator:
            return
        if not host.is_user_logged_in():
            return
        host.add_filter(FILTER_SHOW_INDICATOR, lambda *args: True, PRIORITY_DEFAULT)

    def on_head(self) -> str:
        """Styles and client script for the page head."""
        if not self.config.enabled:
            return ""
        return self._renderer.render_head()

    def on_footer(self) -> str:
        """Panels and indicator for the page footer."""
        if not self.config.enabled:
            return ""
        ctx = self.context
        return self._renderer.render_footer(ctx.store if ctx is not None else None)
