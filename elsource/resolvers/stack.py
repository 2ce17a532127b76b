"""Stack frame resolution.

Turns a debug payload into a normalized SourceLocation. The target frame
of a captured stack is always frame 1: frame 0 is the runtime's own
capture helper, frame 1 is the call site that created the node.
"""

import logging
import posixpath
import re
from typing import Optional
from urllib.parse import unquote, urlsplit

from ..models import (
    DebugPayload,
    DescriptorPayload,
    SourceLocation,
    StackFrame,
    StackPayload,
)
from ..sourcemap import LocationMapper
from .stack_parser import parse_stack

logger = logging.getLogger(__name__)

SERVER_PREFIX = re.compile(r"^about://[^/]+/Server/")
CLIENT_ASSET_SEGMENT = "/_next/static/"
SERVER_CHUNKS_SEGMENT = re.compile(r"/\.next/server/chunks/")
APP_ROUTE_SEGMENT = "/app/"

TARGET_FRAME = 1

_RE_BUNDLER_SCHEME = re.compile(r"^(?:webpack:///|webpack://|webpack-internal:///)")


def strip_query(file: str) -> str:
    """Drop a trailing query string such as a cache-busting ``?35``."""
    return file.split("?")[0]


def normalize_file_path(file: str) -> str:
    """Drop a bundler URL scheme and a leading ``./``; use ``/`` separators.

    ``webpack:///./src/App.tsx`` -> ``src/App.tsx``.
    """
    if not file:
        return file
    normalized = _RE_BUNDLER_SCHEME.sub("", file, count=1).replace("\\", "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def is_server_location(file: Optional[str]) -> bool:
    """True for files tagged with the server pseudo-scheme."""
    return bool(file) and SERVER_PREFIX.match(file) is not None


def embedded_file_path(file: str) -> Optional[str]:
    """Absolute on-disk path embedded in a server pseudo-URL.

    ``about://React/Server/file:///abs/x.js?49`` -> ``/abs/x.js``.
    Returns None when no ``file://`` URL is embedded.
    """
    match = SERVER_PREFIX.match(file)
    if not match:
        return None
    rest = file[match.end():]
    if not rest.startswith("file://"):
        return None
    path = strip_query(rest[len("file://"):])
    if not path.startswith("/"):
        path = "/" + path
    return unquote(path)


def client_chunks_base(client_file: str) -> str:
    """``<origin>[/basePath]/_next/static/chunks/`` from a client bundle URL.

    Raises:
        ValueError: If the URL has no origin or no client asset segment.
    """
    parts = urlsplit(client_file)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"Client bundle URL has no origin: {client_file}")
    index = client_file.find(CLIENT_ASSET_SEGMENT)
    if index < 0:
        raise ValueError(f"Not a client asset URL: {client_file}")
    return client_file[:index] + CLIENT_ASSET_SEGMENT + "chunks/"


def route_from_path(path: str) -> str:
    """Route-like path below the last application-route directory.

    ``/proj/app/blog/index.tsx`` -> ``blog``; ``/proj/app/index.tsx`` -> ``""``.
    """
    index = path.rfind(APP_ROUTE_SEGMENT)
    route = posixpath.splitext(path[index + len(APP_ROUTE_SEGMENT):])[0]
    if route == "index":
        return ""
    if route.endswith("/index"):
        route = route[: -len("/index")]
    return route


def rewrite_server_frame(client_frame: StackFrame, server_frame: StackFrame) -> Optional[str]:
    """Rewrite a server-rendered frame into the client-served equivalent.

    Applies when the client frame is under the client asset segment and the
    server frame carries an embedded ``file://`` path. Returns None when the
    rewrite does not apply.

    Raises:
        ValueError: If the client bundle URL can't be parsed.
    """
    if not client_frame.file_name or CLIENT_ASSET_SEGMENT not in client_frame.file_name:
        return None
    if not server_frame.file_name:
        return None
    path = embedded_file_path(server_frame.file_name)
    if path is None:
        return None

    if SERVER_CHUNKS_SEGMENT.search(path):
        return client_chunks_base(client_frame.file_name) + posixpath.basename(path)

    if APP_ROUTE_SEGMENT in path:
        route = route_from_path(path)
        return f"{client_chunks_base(client_frame.file_name)}app/{route or 'page'}.js"

    return path


def _finish(location: SourceLocation) -> Optional[SourceLocation]:
    location.file = strip_query(location.file)
    if not location.file or location.line <= 0:
        return None
    return location


class StackFrameResolver:
    """Resolve debug payloads to source locations.

    Args:
        mapper: Bundler mapping service used for frames that are not
            server-rendered chunks. Without one, frames stay unmapped.
    """

    def __init__(self, mapper: Optional[LocationMapper] = None):
        self.mapper = mapper

    async def resolve(
        self, payload: Optional[DebugPayload], component_name: Optional[str] = None
    ) -> Optional[SourceLocation]:
        """Resolve a payload, returning None when no valid location results."""
        if isinstance(payload, DescriptorPayload):
            return _finish(SourceLocation(
                file=payload.file or "",
                line=payload.line,
                column=payload.column,
                component_name=component_name,
            ))

        if not isinstance(payload, StackPayload):
            return None

        frames = parse_stack(payload.stack)
        if len(frames) <= TARGET_FRAME:
            logger.debug(f"Stack has {len(frames)} frame(s), need at least 2")
            return None
        target = frames[TARGET_FRAME]

        try:
            rewritten = rewrite_server_frame(frames[0], target)
        except ValueError as e:
            logger.debug(f"Server frame rewrite failed: {e}")
            rewritten = None

        if rewritten is not None:
            return _finish(SourceLocation(
                file=rewritten,
                line=target.line_number or 0,
                column=target.column_number or 0,
                component_name=component_name,
            ))

        mapped = await self._map_frame(target)
        source = mapped or target
        column = source.column_number
        if column is None:
            column = target.column_number or 0
        return _finish(SourceLocation(
            file=source.file_name or target.file_name or "",
            line=source.line_number or target.line_number or 0,
            column=column,
            component_name=component_name,
        ))

    async def _map_frame(self, frame: StackFrame) -> Optional[StackFrame]:
        """Bundler mapping with fallback to None on any failure."""
        if self.mapper is None:
            return None
        try:
            mapped = await self.mapper.get_mapped_location(frame)
        except Exception as e:
            logger.debug(f"Bundler mapping failed for {frame.file_name}: {e}")
            return None
        if mapped is None or not mapped.file_name:
            return None
        return mapped
