"""Server-rendered location resolution.

Locations tagged ``about://<origin>/Server/file:///...`` point into a
server build chunk on disk. The chunk's companion ``.map`` file maps them
back to the original source.
"""

import logging
import os
from pathlib import Path
from typing import Optional
from urllib.parse import unquote

from ..models import SourceLocation
from ..sourcemap import RawSourceMap, load_source_map, open_consumer
from .stack import SERVER_PREFIX, strip_query

logger = logging.getLogger(__name__)


def _strip_file_scheme(value: str) -> str:
    if value.startswith("file:///"):
        return "/" + value[len("file:///"):]
    if value.startswith("file://"):
        return "/" + value[len("file://"):]
    return value


def server_script_path(file: str) -> str:
    """On-disk script path of a server pseudo-URL.

    Raises:
        ValueError: If ``file`` does not carry the server pseudo-scheme.
    """
    match = SERVER_PREFIX.match(file)
    if not match:
        raise ValueError(f"Not a server location: {file}")
    path = _strip_file_scheme(file[match.end():])
    return unquote(strip_query(path), errors="strict")


def find_companion_map(script_path: str) -> Optional[Path]:
    """Return the ``.map`` file for a script, or None if there is none.

    Tries ``<script>.map`` first, then the script's extension replaced
    with ``.map``.
    """
    script = Path(script_path)
    candidates = [Path(script_path + ".map")]
    if script.suffix:
        candidates.append(script.with_suffix(".map"))
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def _has_scheme(value: str) -> bool:
    return "://" in value


def resolve_original_path(source: str, map_path: Path, raw: RawSourceMap) -> str:
    """Absolute path of a mapped source.

    Relative sources are joined against the map's directory, through
    ``sourceRoot`` when the map declares one (itself relative to the map's
    directory unless absolute). Separators are normalized to ``/``.
    """
    resolved = _strip_file_scheme(source)

    if not os.path.isabs(resolved) and not _has_scheme(resolved):
        map_dir = str(map_path.parent)
        source_root = raw.source_root
        if source_root:
            source_root = _strip_file_scheme(source_root)
            if os.path.isabs(source_root):
                resolved = os.path.join(source_root, resolved)
            else:
                resolved = os.path.join(map_dir, source_root, resolved)
        else:
            resolved = os.path.join(map_dir, resolved)
        resolved = os.path.normpath(resolved)

    return resolved.replace("\\", "/")


async def _resolve(location: SourceLocation) -> SourceLocation:
    script_path = server_script_path(location.file)

    map_path = find_companion_map(script_path)
    if map_path is None:
        logger.debug(f"No source map next to {script_path}")
        return location

    raw = load_source_map(map_path)

    async with open_consumer(raw) as consumer:
        position = consumer.original_position_for(location.line, location.column)

    if position.source is None or position.line is None:
        return location

    return SourceLocation(
        file=resolve_original_path(position.source, map_path, raw),
        line=position.line or location.line,
        column=position.column if position.column is not None else location.column,
        component_name=location.component_name,
        source_code=location.source_code,
    )


async def resolve_server_location(location: SourceLocation) -> SourceLocation:
    """Resolve a server pseudo-URL location to its original source.

    Locations without the server prefix are returned unchanged, as is the
    input whenever the map is missing, unreadable or has no mapping for
    the position. Never raises.
    """
    if not location.file or not SERVER_PREFIX.match(location.file):
        return location

    try:
        return await _resolve(location)
    except Exception as e:
        logger.debug(f"Server location resolution failed for {location.file}: {e}")
        return location
