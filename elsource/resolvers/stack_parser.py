"""Stack trace tokenizer.

Splits captured stack text into ordered frames. Understands V8 frames
(``at fn (url:line:col)``, ``at url:line:col``) and Gecko/WebKit frames
(``fn@url:line:col``). Lines without a position, including the leading
``Error: message`` header, are dropped.
"""

import re
from typing import Any, Optional

from ..models import StackFrame, get_field

_RE_V8_FRAME = re.compile(r"^\s*at\s+(?:async\s+)?(?:(?P<fn>.*?)\s+\((?P<loc>.+)\)|(?P<bare>.+))\s*$")
_RE_V8_EVAL = re.compile(r"\(eval at [^()]*\((?P<loc>[^()]+:\d+(?::\d+)?)\)")
_RE_GECKO_FRAME = re.compile(r"^\s*(?P<fn>[^@]*)@(?P<loc>.+:\d+(?::\d+)?)\s*$")
_RE_LOCATION = re.compile(r"^(?P<file>.*?):(?P<line>\d+)(?::(?P<col>\d+))?$")


def split_location(location: str) -> tuple[Optional[str], Optional[int], Optional[int]]:
    """Split ``url:line:col`` into its parts.

    The URL itself may contain colons (schemes, ports, ``about://`` paths);
    the trailing numeric fields are taken from the end.
    """
    location = location.strip()
    match = _RE_LOCATION.match(location)
    if not match:
        return location or None, None, None
    column = match.group("col")
    return (
        match.group("file") or None,
        int(match.group("line")),
        int(column) if column is not None else None,
    )


def _parse_v8_line(line: str) -> Optional[StackFrame]:
    match = _RE_V8_FRAME.match(line)
    if not match:
        return None
    function_name = match.group("fn")
    location = match.group("loc") or match.group("bare")

    if "(eval at " in line:
        eval_match = _RE_V8_EVAL.search(line)
        if eval_match:
            location = eval_match.group("loc")
            function_name = function_name or "eval"

    file_name, line_number, column_number = split_location(location)
    if line_number is None:
        return None
    return StackFrame(
        file_name=file_name,
        line_number=line_number,
        column_number=column_number,
        function_name=function_name or None,
        source=line,
    )


def _parse_gecko_line(line: str) -> Optional[StackFrame]:
    match = _RE_GECKO_FRAME.match(line)
    if not match:
        return None
    file_name, line_number, column_number = split_location(match.group("loc"))
    if line_number is None:
        return None
    return StackFrame(
        file_name=file_name,
        line_number=line_number,
        column_number=column_number,
        function_name=match.group("fn") or None,
        source=line,
    )


def parse_stack(stack: str) -> list[StackFrame]:
    """Tokenize stack text into ordered frames."""
    frames = []
    for line in stack.splitlines():
        if not line.strip():
            continue
        if line.lstrip().startswith("at "):
            frame = _parse_v8_line(line)
        else:
            frame = _parse_gecko_line(line)
        if frame is not None:
            frames.append(frame)
    return frames


def stack_text(captured: Any) -> Optional[str]:
    """Return the stack text of a captured error.

    Accepts the text itself, or an error-like object or mapping with a
    string ``stack`` field.
    """
    if isinstance(captured, str):
        return captured
    stack = get_field(captured, "stack")
    if isinstance(stack, str):
        return stack
    return None
