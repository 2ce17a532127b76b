"""Position lookup over decoded source maps.

Decodes Base64 VLQ ``mappings`` into per-line segment tables and answers
generated -> original position queries, the way mozilla's SourceMapConsumer
does with its default greatest-lower-bound bias.
"""

import bisect
import logging
import posixpath
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from .loader import RawSourceMap

logger = logging.getLogger(__name__)

_BASE64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_VLQ_CONTINUATION = 0x20
_VLQ_MASK = 0x1F

# Process-wide decoder table, built on first use. Concurrent first callers
# may both build it; the tables are identical so the last assignment wins.
_vlq_table: Optional[dict[str, int]] = None


def ensure_decoder_initialized() -> dict[str, int]:
    """Build the process-wide VLQ decoder table once and return it."""
    global _vlq_table
    table = _vlq_table
    if table is None:
        table = {char: index for index, char in enumerate(_BASE64_ALPHABET)}
        _vlq_table = table
        logger.debug("Initialized source map VLQ decoder")
    return table


def decoder_initialized() -> bool:
    return _vlq_table is not None


def decode_vlq(segment: str) -> list[int]:
    """Decode one mappings segment into its signed integer fields.

    Raises:
        ValueError: On characters outside the Base64 alphabet or a
            segment ending mid-value.
    """
    table = ensure_decoder_initialized()
    values: list[int] = []
    value = 0
    shift = 0
    for char in segment:
        digit = table.get(char)
        if digit is None:
            raise ValueError(f"Invalid Base64 VLQ character: {char!r}")
        value += (digit & _VLQ_MASK) << shift
        if digit & _VLQ_CONTINUATION:
            shift += 5
            continue
        negative = value & 1
        value >>= 1
        values.append(-value if negative else value)
        value = 0
        shift = 0
    if shift:
        raise ValueError(f"Truncated Base64 VLQ segment: {segment!r}")
    return values


@dataclass(frozen=True)
class OriginalPosition:
    """Result of an original position query. ``source`` is None when unmapped."""

    source: Optional[str] = None
    line: Optional[int] = None  # 1-based
    column: Optional[int] = None  # 0-based
    name: Optional[str] = None


@dataclass(frozen=True)
class _Segment:
    generated_column: int
    source: Optional[str]
    original_line: int  # 0-based
    original_column: int
    name: Optional[str]


def _apply_source_root(source: Optional[str], source_root: Optional[str]) -> Optional[str]:
    if source is None or not source_root:
        return source
    if "://" in source or source.startswith("/"):
        return source
    return posixpath.join(source_root, source)


def _decode_mappings(
    raw: RawSourceMap,
    lines: dict[int, list[_Segment]],
    line_offset: int = 0,
    column_offset: int = 0,
    apply_source_root: bool = False,
) -> None:
    """Decode ``raw.mappings`` into ``lines``, shifted by a section offset."""
    sources = [
        _apply_source_root(s, raw.source_root) if apply_source_root else s
        for s in raw.sources
    ]
    source_index = 0
    original_line = 0
    original_column = 0
    name_index = 0

    for line_number, line_text in enumerate(raw.mappings.split(";")):
        if not line_text:
            continue
        generated_line = line_number + line_offset
        generated_column = 0
        segments = lines.setdefault(generated_line, [])
        for text in line_text.split(","):
            if not text:
                continue
            fields = decode_vlq(text)
            generated_column += fields[0]
            column = generated_column + (column_offset if line_number == 0 else 0)
            if len(fields) < 4:
                segments.append(_Segment(column, None, 0, 0, None))
                continue
            source_index += fields[1]
            original_line += fields[2]
            original_column += fields[3]
            name = None
            if len(fields) >= 5:
                name_index += fields[4]
                if 0 <= name_index < len(raw.names):
                    name = raw.names[name_index]
            source = sources[source_index] if 0 <= source_index < len(sources) else None
            segments.append(_Segment(column, source, original_line, original_column, name))


class SourceMapConsumer:
    """Generated -> original position lookup for one loaded source map."""

    def __init__(self, raw: RawSourceMap):
        self.file = raw.file
        self.source_root = raw.source_root
        self._lines: Optional[dict[int, list[_Segment]]] = {}
        self._columns: dict[int, list[int]] = {}

        if raw.sections is not None:
            for section in raw.sections:
                if section.map is None:
                    continue
                _decode_mappings(
                    section.map,
                    self._lines,
                    line_offset=section.offset.line,
                    column_offset=section.offset.column,
                    apply_source_root=True,
                )
        else:
            _decode_mappings(raw, self._lines)

        for line, segments in self._lines.items():
            segments.sort(key=lambda s: s.generated_column)
            self._columns[line] = [s.generated_column for s in segments]

    @property
    def released(self) -> bool:
        return self._lines is None

    def original_position_for(self, line: int, column: int) -> OriginalPosition:
        """Map a generated position (1-based line, 0-based column).

        Picks the closest segment at or before ``column`` on the same line.
        """
        if self._lines is None:
            raise RuntimeError("SourceMapConsumer used after release()")
        segments = self._lines.get(line - 1)
        if not segments:
            return OriginalPosition()
        index = bisect.bisect_right(self._columns[line - 1], column) - 1
        if index < 0:
            return OriginalPosition()
        segment = segments[index]
        if segment.source is None:
            return OriginalPosition()
        return OriginalPosition(
            source=segment.source,
            line=segment.original_line + 1,
            column=segment.original_column,
            name=segment.name,
        )

    def release(self) -> None:
        """Drop the decoded tables. Safe to call more than once."""
        self._lines = None
        self._columns = {}


async def load_consumer(raw: RawSourceMap) -> SourceMapConsumer:
    """Create a consumer for ``raw``, initializing the decoder on first use.

    Raises:
        ValueError: If the mappings are malformed.
    """
    ensure_decoder_initialized()
    return SourceMapConsumer(raw)


@asynccontextmanager
async def open_consumer(raw: RawSourceMap) -> AsyncIterator[SourceMapConsumer]:
    """Load a consumer and release it on every exit path."""
    consumer = await load_consumer(raw)
    try:
        yield consumer
    finally:
        consumer.release()
