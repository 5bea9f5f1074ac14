"""
Explicit Value Dumps.

Serializes an arbitrary value with one of three styles and records the
result as a dump event, tagged with the caller's file and line.
"""

from __future__ import annotations

import logging
import pprint
from typing import Any, Callable, Dict, Optional

from .events import DUMP_TYPE, CapturedEvent, Category, now_timestamp
from .formatter import caller_location
from .store import CaptureStore

logger = logging.getLogger(__name__)

INDENT = "  "


def _verbose(value: Any, level: int, seen: set) -> str:
    pad = INDENT * level

    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return f"bool({'true' if value else 'false'})"
    if isinstance(value, int):
        return f"int({value})"
    if isinstance(value, float):
        return f"float({value!r})"
    if isinstance(value, str):
        return f'string({len(value.encode("utf-8", "replace"))}) "{value}"'
    if isinstance(value, (bytes, bytearray)):
        return f"{type(value).__name__}({len(value)}) {bytes(value)!r}"

    if id(value) in seen:
        return "*RECURSION*"

    seen.add(id(value))
    try:
        if isinstance(value, dict):
            entries = [
                f"{pad}{INDENT}[{key!r}] => {_verbose(item, level + 1, seen)}"
                for key, item in value.items()
            ]
            head = f"{type(value).__name__}({len(value)})"
        elif isinstance(value, (list, tuple)):
            entries = [
                f"{pad}{INDENT}[{index}] => {_verbose(item, level + 1, seen)}"
                for index, item in enumerate(value)
            ]
            head = f"{type(value).__name__}({len(value)})"
        elif isinstance(value, (set, frozenset)):
            entries = [
                f"{pad}{INDENT}{_verbose(item, level + 1, seen)}"
                for item in sorted(value, key=repr)
            ]
            head = f"{type(value).__name__}({len(value)})"
        elif hasattr(value, "__dict__"):
            attributes = vars(value)
            entries = [
                f"{pad}{INDENT}[{name!r}] => {_verbose(item, level + 1, seen)}"
                for name, item in attributes.items()
            ]
            head = f"object({type(value).__qualname__})({len(attributes)})"
        else:
            return f"object({type(value).__qualname__}) {value!r}"
    finally:
        seen.discard(id(value))

    if not entries:
        return head + " {\n" + pad + "}"
    return head + " {\n" + "\n".join(entries) + "\n" + pad + "}"


def dump_verbose(value: Any) -> str:
    """Full structural dump with type names and sizes."""
    return _verbose(value, 0, set()) + "\n"


def dump_readable(value: Any) -> str:
    """Pretty-printed, human-oriented dump."""
    return pprint.pformat(value)


def dump_reconstructable(value: Any) -> str:
    """Dump that evaluates back to an equal value for builtin types."""
    return repr(value)


SERIALIZERS: Dict[str, Callable[[Any], str]] = {
    "verbose": dump_verbose,
    "readable": dump_readable,
    "reconstructable": dump_reconstructable,
}

DEFAULT_STYLE = "verbose"


def serialize(value: Any, style: str = DEFAULT_STYLE) -> str:
    """
    Serialize a value with the named style.

    Unknown styles fall back to verbose.
    """
    serializer = SERIALIZERS.get(style)
    if serializer is None:
        logger.debug("Unknown dump style '%s', using %s", style, DEFAULT_STYLE)
        serializer = SERIALIZERS[DEFAULT_STYLE]
    try:
        return serializer(value)
    except Exception as e:
        logger.warning("Dump serializer '%s' failed: %s", style, e)
        return f"<unserializable {type(value).__qualname__}: {e}>"


class DumpCapture:
    """
    Explicit instrumentation: dump a value into the capture store.

    Example:
        dumper = DumpCapture(store)
        dumper.capture({"a": 1}, "readable")

        store.get(Category.DUMPS)[0].message  # "{'a': 1}"
    """

    def __init__(
        self,
        store: Optional[CaptureStore] = None,
        clock: Optional[Callable] = None,
        default_style: str = DEFAULT_STYLE,
    ):
        """
        Initialize the dump capture.

        Args:
            store: Capture store to record into (created lazily if None)
            clock: Callable returning the current datetime
            default_style: Style used when capture() gets none
        """
        self._store = store
        self._clock = clock
        self._default_style = default_style

    @property
    def store(self) -> CaptureStore:
        if self._store is None:
            self._store = CaptureStore()
        return self._store

    def capture(
        self,
        value: Any,
        style: Optional[str] = None,
        depth: int = 1,
    ) -> CapturedEvent:
        """
        Serialize a value and record it as a dump.

        Args:
            value: The value to dump
            style: verbose, readable or reconstructable
            depth: Frames above this method holding the reported call site

        Returns:
            The recorded dump event
        """
        output = serialize(value, style or self._default_style)
        file, line = caller_location(depth)

        event = CapturedEvent(
            timestamp=now_timestamp(self._clock),
            message=output,
            category=Category.DUMPS,
            file=file,
            line=line,
            type=DUMP_TYPE,
        )
        return self.store.record(Category.DUMPS, event)
