import ast
import inspect
import os
import sys
from datetime import datetime

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from debug_overlay import capture_dump, request_scope
from debug_overlay.debug.config import OverlayConfig
from debug_overlay.debug.dump import DumpCapture, dump_verbose, serialize
from debug_overlay.debug.events import Category
from debug_overlay.debug.store import CaptureStore


class Basket:
    def __init__(self):
        self.items = ["apple"]
        self.total = 2


class TestSerializers:
    """Test suite for the three dump styles."""

    def test_verbose_dict(self):
        assert dump_verbose({"a": 1}) == "dict(1) {\n  ['a'] => int(1)\n}\n"

    def test_verbose_scalars(self):
        assert dump_verbose([1, "hi", None, True, 1.5]) == (
            "list(5) {\n"
            "  [0] => int(1)\n"
            "  [1] => string(2) \"hi\"\n"
            "  [2] => NULL\n"
            "  [3] => bool(true)\n"
            "  [4] => float(1.5)\n"
            "}\n"
        )

    def test_verbose_nested(self):
        assert dump_verbose({"items": [1]}) == (
            "dict(1) {\n"
            "  ['items'] => list(1) {\n"
            "    [0] => int(1)\n"
            "  }\n"
            "}\n"
        )

    def test_verbose_recursion(self):
        loop = []
        loop.append(loop)
        assert dump_verbose(loop) == "list(1) {\n  [0] => *RECURSION*\n}\n"

    def test_verbose_object(self):
        output = dump_verbose(Basket())
        assert output.startswith("object(Basket)(2) {\n")
        assert "['total'] => int(2)" in output

    def test_readable(self):
        assert serialize({"a": 1}, "readable") == "{'a': 1}"

    def test_reconstructable(self):
        value = {"a": [1, 2], "b": (3, None), "c": "x"}
        assert ast.literal_eval(serialize(value, "reconstructable")) == value

    def test_unknown_style_falls_back(self):
        assert serialize({"a": 1}, "xml") == dump_verbose({"a": 1})


class TestDumpCapture:
    """Test suite for explicit dumps."""

    def setup_method(self):
        self.store = CaptureStore()
        self.dumper = DumpCapture(
            store=self.store,
            clock=lambda: datetime(2024, 5, 1, 12, 0, 0),
        )

    def test_records_caller_location(self):
        expected_line = inspect.currentframe().f_lineno + 1
        event = self.dumper.capture({"a": 1}, "readable")

        assert self.store.get(Category.DUMPS) == [event]
        assert event.message == "{'a': 1}"
        assert event.file == __file__
        assert event.line == expected_line
        assert event.type == "DEBUG_DUMP"
        assert event.stack == ""
        assert event.timestamp == "2024-05-01 12:00:00"

    def test_default_style_is_verbose(self):
        event = self.dumper.capture({"a": 1})
        assert event.message == dump_verbose({"a": 1})

    def test_most_recent_first(self):
        self.dumper.capture(1, "reconstructable")
        self.dumper.capture(2, "reconstructable")
        assert [e.message for e in self.store.get(Category.DUMPS)] == ["2", "1"]

    def test_only_dumps_bucket(self):
        self.dumper.capture("x")
        counts = self.store.counts()
        assert counts[Category.DUMPS] == 1
        assert self.store.total() == 1


class TestCaptureDumpEntryPoint:
    """Test suite for the module-level capture_dump."""

    def test_inside_request(self):
        with request_scope(config=OverlayConfig(intercept_errors=False)) as ctx:
            expected_line = inspect.currentframe().f_lineno + 1
            event = capture_dump({"a": 1}, "readable")

            dumps = ctx.store.get(Category.DUMPS)
            assert dumps == [event]
            assert event.message == "{'a': 1}"
            assert event.file == __file__
            assert event.line == expected_line

    def test_config_default_style(self):
        config = OverlayConfig(intercept_errors=False, default_dump_style="reconstructable")
        with request_scope(config=config):
            event = capture_dump([1, 2])
        assert event.message == "[1, 2]"

    def test_outside_request(self):
        assert capture_dump({"a": 1}) is None
