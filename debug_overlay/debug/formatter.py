"""
Log Line and Backtrace Formatting.

Pure functions turning captured data into the plain-text log format:
severity labels, backtraces and the separator-framed log block.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Iterable, List, Mapping, Optional

from .events import CapturedEvent, ErrorCode, StackFrame

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 40

UNKNOWN_TYPE = "UNKNOWN"

INTERNAL_FUNCTION = "[internal function]"

LOG_LINE_TEMPLATE = (
    "[{timestamp}]\n"
    "[!] {message} in {file} on line {line}\n"
    "{separator}\n"
    "\n"
    "[>] Stack trace:\n"
    "{stack}\n"
    "{separator}\n"
)


def type_name(code: Any) -> str:
    """
    Convert a severity code to its label.

    Args:
        code: Severity code, normally an ErrorCode or raw int

    Returns:
        The E_* label, or UNKNOWN for anything outside the taxonomy
    """
    if isinstance(code, bool) or not isinstance(code, int):
        return UNKNOWN_TYPE
    try:
        return ErrorCode(code).name
    except ValueError:
        return UNKNOWN_TYPE


def _as_line_number(line: Any) -> int:
    try:
        return int(line)
    except (TypeError, ValueError, OverflowError):
        return 0


def format_log_line(event: CapturedEvent) -> str:
    """
    Format a captured event as a separator-framed log block.

    Args:
        event: The event to format

    Returns:
        The log block, ending with a newline
    """
    return LOG_LINE_TEMPLATE.format(
        timestamp=event.timestamp,
        message=event.message,
        file=event.file,
        line=_as_line_number(event.line),
        separator=SEPARATOR,
        stack=event.stack,
    )


def _frame_field(frame: Any, name: str) -> Any:
    if isinstance(frame, Mapping):
        return frame.get(name)
    return getattr(frame, name, None)


def format_frame(index: int, frame: Any) -> str:
    """Format one backtrace line, falling back on missing fields."""
    file = _frame_field(frame, "file")
    line = _frame_field(frame, "line")
    qualifier = _frame_field(frame, "qualifier") or ""
    function = _frame_field(frame, "function") or ""

    out = f"#{index} "
    out += file if file else INTERNAL_FUNCTION
    out += f"({line}): " if line not in (None, "") else " "
    out += f"{qualifier}{function}()\n"
    return out


def format_backtrace(frames: Iterable[Any], skip: int = 0) -> str:
    """
    Format a sequence of stack frames, nearest caller first.

    The first ``skip`` frames are dropped. Remaining lines keep their
    original index so the numbering matches the full stack.

    Args:
        frames: StackFrame objects or mappings with the same keys
        skip: Number of leading frames to leave out

    Returns:
        One line per frame, each terminated by a newline
    """
    output = ""
    for i, frame in enumerate(frames):
        if i < skip:
            continue
        try:
            output += format_frame(i, frame)
        except Exception as e:
            logger.warning("Unformattable stack frame #%d: %s", i, e)
    return output


def _qualifier(code) -> str:
    qualname = getattr(code, "co_qualname", code.co_name)
    if "." not in qualname:
        return ""
    owner = qualname.rsplit(".", 1)[0]
    if owner.endswith("<locals>"):
        return ""
    return owner + "."


def collect_frames(start=None) -> List[StackFrame]:
    """
    Snapshot the live call stack, nearest caller first.

    Args:
        start: Frame to start from (defaults to the caller of this function)

    Returns:
        List of StackFrame entries
    """
    frame = start if start is not None else inspect.currentframe().f_back
    frames: List[StackFrame] = []
    try:
        while frame is not None:
            code = frame.f_code
            frames.append(StackFrame(
                file=code.co_filename,
                line=frame.f_lineno,
                qualifier=_qualifier(code),
                function=code.co_name,
            ))
            frame = frame.f_back
    finally:
        del frame
    return frames


def caller_location(depth: int = 1) -> tuple:
    """
    Resolve the file and line of a caller further up the stack.

    Args:
        depth: How many frames above the caller of this function to look

    Returns:
        (file, line) tuple, empty strings when the stack is too shallow
    """
    frame: Optional[Any] = inspect.currentframe()
    try:
        for _ in range(depth + 1):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return "", ""
        return frame.f_code.co_filename, frame.f_lineno
    finally:
        del frame
