import logging
import os
import sys
import warnings

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from debug_overlay import (
    DebugContext,
    DebugManager,
    Host,
    current_context,
    request_scope,
    trigger_error,
)
from debug_overlay.debug.config import OverlayConfig, get_preset
from debug_overlay.debug.emitter import ERROR_LOG_LOGGER, LoggingSink, configure_error_log
from debug_overlay.debug.events import Category, ErrorCode

import legacy_api


def warn_low_disk():
    warnings.warn("low disk", UserWarning)


class FakeHost:
    def __init__(self, admin=False, logged_in=True):
        self.actions = []
        self.filters = []
        self._admin = admin
        self._logged_in = logged_in

    def add_action(self, hook, callback, priority=10):
        self.actions.append((hook, callback, priority))

    def add_filter(self, hook, callback, priority=10):
        self.filters.append((hook, callback, priority))

    def is_admin(self):
        return self._admin

    def is_user_logged_in(self):
        return self._logged_in

    def hooks(self):
        return [hook for hook, _, _ in self.actions]

    def fire(self, hook):
        return [callback() for name, callback, _ in sorted(self.actions, key=lambda a: a[2]) if name == hook]


class TestDebugManager:
    """Test suite for the host lifecycle callbacks."""

    def setup_method(self):
        self.lines = []
        self.manager = DebugManager()

    def test_host_protocol(self):
        assert isinstance(FakeHost(), Host)

    def test_init_registers_front_end_hooks(self):
        host = FakeHost(admin=False)
        self.manager.init(host)
        assert host.hooks() == ["init", "init", "admin_head", "head", "footer"]

    def test_init_registers_admin_footer(self):
        host = FakeHost(admin=True)
        self.manager.init(host)
        assert "admin_footer" in host.hooks()
        assert "footer" not in host.hooks()

    def test_force_indicator_for_logged_in_users(self):
        host = FakeHost(logged_in=True)
        self.manager.init(host)
        host.fire("init")
        assert [name for name, _, _ in host.filters] == ["show_admin_bar"]
        assert host.filters[0][1]() is True

    def test_no_indicator_for_visitors(self):
        host = FakeHost(logged_in=False)
        self.manager.init(host)
        host.fire("init")
        assert host.filters == []

    def test_startup_registers_interceptor(self):
        ctx = DebugContext(
            config=OverlayConfig(capture_uncaught=False),
            error_logger=self.lines.append,
        )
        manager = DebugManager(context=ctx)
        try:
            manager.on_startup()
            assert ctx.interceptor.registered
            manager.on_startup()
        finally:
            ctx.finish()
        assert not ctx.interceptor.registered

    def test_startup_without_context(self):
        self.manager.on_startup()

    def test_full_request(self):
        host = FakeHost()
        self.manager.init(host)
        config = OverlayConfig(capture_uncaught=False)

        with request_scope(config=config, error_logger=self.lines.append):
            host.fire("init")
            warnings.warn("low disk", UserWarning)
            trigger_error("payment failed", ErrorCode.E_USER_ERROR)

            head = host.fire("head")[0]
            footer = host.fire("footer")[0]

        assert "toggleErrorPanel" in head
        assert 'class="debug-panel errors"' in footer
        assert 'class="debug-panel warnings"' in footer
        assert "Debug (2)" in footer
        assert 'class="debug-counter error"' in footer
        assert len(self.lines) == 2

    def test_footer_without_events(self):
        with request_scope(config=OverlayConfig(intercept_errors=False)):
            footer = self.manager.on_footer()
        assert "debug-panel" not in footer
        assert "debug-counter" not in footer

    def test_disabled(self):
        manager = DebugManager(config=OverlayConfig(enabled=False))
        assert manager.on_head() == ""
        assert manager.on_footer() == ""


class TestRequestScope:
    """Test suite for the request lifecycle."""

    def setup_method(self):
        self.lines = []

    def test_context_is_current_only_inside(self):
        assert current_context() is None
        with request_scope(config=OverlayConfig(intercept_errors=False)) as ctx:
            assert current_context() is ctx
            assert ctx.started
        assert current_context() is None
        assert ctx.finished

    def test_store_discarded_at_end(self):
        with request_scope(error_logger=self.lines.append) as ctx:
            trigger_error("notice me")
            assert ctx.store.counts()[Category.NOTICES] == 1
        assert ctx.store.is_empty()
        assert not ctx.interceptor.registered

    def test_warning_lands_in_bucket(self):
        config = OverlayConfig(capture_uncaught=False)
        with request_scope(config=config, error_logger=self.lines.append) as ctx:
            warnings.warn("careful", RuntimeWarning)
            assert ctx.store.counts()[Category.WARNINGS] == 1
            assert ctx.store.get(Category.WARNINGS)[0].type == "E_WARNING"

    def test_trigger_error_location(self):
        with request_scope(config=OverlayConfig(intercept_errors=False), error_logger=self.lines.append) as ctx:
            trigger_error("fatal", ErrorCode.E_USER_ERROR)
            event = ctx.store.get(Category.ERRORS)[0]
        assert event.file == __file__
        assert "trigger_error()" in event.stack.splitlines()[0]

    def test_same_warning_in_every_request(self):
        per_request = []
        with warnings.catch_warnings():
            warnings.resetwarnings()
            warnings.simplefilter("default")
            for _ in range(2):
                with request_scope(error_logger=self.lines.append) as ctx:
                    warn_low_disk()
                    warn_low_disk()
                    per_request.append(ctx.store.counts()[Category.WARNINGS])
        assert per_request == [2, 2]

    def test_library_deprecation_reported(self):
        with warnings.catch_warnings():
            warnings.resetwarnings()
            warnings.filterwarnings("ignore", category=DeprecationWarning)
            with request_scope(error_logger=self.lines.append) as ctx:
                legacy_api.old_api()
                notices = ctx.store.get(Category.NOTICES)
        assert len(notices) == 1
        assert notices[0].type == "E_DEPRECATED"
        assert notices[0].message.startswith("old_api() is deprecated")
        assert notices[0].file == __file__

    def test_warnings_not_echoed_by_default(self, monkeypatch):
        shown = []
        monkeypatch.setattr(warnings, "showwarning", lambda *args: shown.append(args))
        with request_scope(error_logger=self.lines.append) as ctx:
            warn_low_disk()
            assert ctx.store.total() == 1
        assert shown == []

    def test_trigger_error_outside_request(self):
        assert trigger_error("nobody listens") is False

    def test_context_cannot_start_twice(self):
        ctx = DebugContext(config=OverlayConfig(intercept_errors=False))
        ctx.start()
        with pytest.raises(RuntimeError):
            ctx.start()
        ctx.finish()


class TestConfig:
    """Test suite for configuration and presets."""

    def test_defaults(self):
        config = OverlayConfig.from_dict(None)
        assert config.intercept_errors
        assert config.stack_skip == 2
        assert config.default_dump_style == "verbose"

    def test_preset_with_overrides(self):
        config = OverlayConfig.from_dict({"preset": "verbose", "log_file": "/tmp/debug.log"})
        assert config.capture_logging
        assert config.report_all
        assert config.log_file == "/tmp/debug.log"

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown preset"):
            OverlayConfig.from_dict({"preset": "loud"})
        with pytest.raises(ValueError):
            get_preset("loud")

    def test_extra_fields_allowed(self):
        config = OverlayConfig.from_dict({"theme": "dark"})
        assert config.theme == "dark"

    def test_invalid_dump_style(self):
        with pytest.raises(ValueError):
            OverlayConfig(default_dump_style="xml")


class TestErrorLogFile:
    """Test suite for the file-backed error log."""

    def test_configure_error_log(self, tmp_path):
        path = tmp_path / "logs" / "debug.log"
        handler = configure_error_log(str(path))
        try:
            assert path.exists()
            assert configure_error_log(str(path)) is None

            LoggingSink()("[!] written to disk")
            handler.flush()
            assert "[!] written to disk" in path.read_text()
        finally:
            logging.getLogger(ERROR_LOG_LOGGER).removeHandler(handler)
            handler.close()
