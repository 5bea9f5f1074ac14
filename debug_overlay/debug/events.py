"""
Captured Event Definitions.

This module defines the data model shared by every part of the overlay:
the fixed severity-code taxonomy, the four display categories, stack
frames and the captured event record itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Dict, Optional, Union

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

DUMP_TYPE = "DEBUG_DUMP"


class ErrorCode(IntEnum):
    """
    Severity codes reported to the interceptor.

    Values follow the classic runtime error bitmask so that hosts
    forwarding raw integer codes land on the right label.
    """
    E_ERROR = 1
    E_WARNING = 2
    E_PARSE = 4
    E_NOTICE = 8
    E_CORE_ERROR = 16
    E_CORE_WARNING = 32
    E_COMPILE_ERROR = 64
    E_COMPILE_WARNING = 128
    E_USER_ERROR = 256
    E_USER_WARNING = 512
    E_USER_NOTICE = 1024
    E_STRICT = 2048
    E_RECOVERABLE_ERROR = 4096
    E_DEPRECATED = 8192
    E_USER_DEPRECATED = 16384


class Category(str, Enum):
    """
    Storage buckets, in fixed display order.

    The value doubles as the CSS class of the panel and the argument
    of the client-side toggle.
    """
    ERRORS = "errors"
    WARNINGS = "warnings"
    NOTICES = "notices"
    DUMPS = "dumps"

    @property
    def label(self) -> str:
        """Human-readable label used in the indicator sub-entries."""
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Union["Category", str]) -> "Category":
        """
        Resolve a category from an enum member or its string value.

        Raises:
            ValueError: If the value names no category
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown category '{value}'. Available: {[c.value for c in cls]}"
            ) from None


@dataclass(frozen=True)
class StackFrame:
    """One frame of a backtrace, every field optional."""
    file: Optional[str] = None
    line: Optional[int] = None
    qualifier: Optional[str] = None
    function: Optional[str] = None


def now_timestamp(clock=None) -> str:
    """Wall-clock timestamp with second precision."""
    moment = clock() if clock is not None else datetime.now()
    return moment.strftime(TIMESTAMP_FORMAT)


@dataclass
class CapturedEvent:
    """
    A single captured error, warning, notice or dump.

    Attributes:
        timestamp: Wall-clock time, second precision
        message: Raw error string or serialized dump output
        file: Origin file, empty when unavailable
        line: Origin line, empty when unavailable
        category: Bucket the event is stored in
        type: Label from the severity taxonomy (DEBUG_DUMP for dumps)
        stack: Formatted backtrace, empty for dumps
    """
    timestamp: str
    message: str
    category: Category
    file: str = ""
    line: Union[int, str] = ""
    type: str = ""
    stack: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a plain dictionary for templates and logging.

        Returns:
            Dictionary representation of the event
        """
        return {
            "timestamp": self.timestamp,
            "message": self.message,
            "file": self.file,
            "line": self.line,
            "category": self.category.value,
            "type": self.type,
            "stack": self.stack,
        }
