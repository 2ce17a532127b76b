"""Source map loading utilities.

Uses msgspec to decode source map JSON straight into typed structs.
"""

from pathlib import Path
from typing import Optional, Union

import msgspec


class OffsetSpec(msgspec.Struct, omit_defaults=True):
    """Generated-position offset of an index map section (0-based)."""

    line: int = 0
    column: int = 0


class SectionSpec(msgspec.Struct, omit_defaults=True):
    """Section of an index source map."""

    offset: OffsetSpec = msgspec.field(default_factory=OffsetSpec)
    map: Optional["RawSourceMap"] = None
    url: Optional[str] = None  # sections referencing external maps are ignored


class RawSourceMap(msgspec.Struct, rename="camel", omit_defaults=True):
    """Source map (revision 3) as stored in a ``.map`` file.

    Index maps carry ``sections`` instead of ``mappings``; bundlers that
    concatenate chunks (Turbopack) emit them.
    """

    version: int = 3
    file: Optional[str] = None
    source_root: Optional[str] = None
    sources: list[Optional[str]] = []
    sources_content: Optional[list[Optional[str]]] = None
    names: list[str] = []
    mappings: str = ""
    sections: Optional[list[SectionSpec]] = None

    @property
    def is_indexed(self) -> bool:
        return self.sections is not None


# Create reusable decoder for performance
_decoder = msgspec.json.Decoder(RawSourceMap)


def decode_source_map(data: Union[bytes, str]) -> RawSourceMap:
    """Decode source map JSON.

    Raises:
        msgspec.DecodeError: If the data is not a valid source map document.
    """
    return _decoder.decode(data)


def load_source_map(path: Union[str, Path]) -> RawSourceMap:
    """Load a source map from a ``.map`` file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        msgspec.DecodeError: If the file is not a valid source map.
    """
    with open(path, "rb") as f:
        return _decoder.decode(f.read())
