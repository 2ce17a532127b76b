"""Bundler position mapping.

Maps a stack frame inside a served bundle back to its original source by
fetching the bundle, following its ``sourceMappingURL`` comment and
querying the referenced map. Works over http(s) with httpx and over
``file://`` URLs or plain paths from disk.
"""

import base64
import logging
import re
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import unquote, urljoin, urlsplit

import httpx

from ..models import StackFrame
from .consumer import SourceMapConsumer, load_consumer
from .loader import RawSourceMap, decode_source_map

logger = logging.getLogger(__name__)

_RE_SOURCE_MAPPING_URL = re.compile(r"[#@]\s*sourceMappingURL=([^\s'\"]+)\s*(?:\*/)?\s*$", re.MULTILINE)
_RE_DATA_URL = re.compile(r"^data:application/json[^,]*?(;base64)?,(.*)$", re.DOTALL)

DEFAULT_TIMEOUT = 5.0


class LocationMapper(Protocol):
    """Best-effort bundled -> original frame mapping service."""

    async def get_mapped_location(self, frame: StackFrame) -> Optional[StackFrame]:
        ...


def find_source_mapping_url(script: str) -> Optional[str]:
    """Return the last ``sourceMappingURL`` declared in a script."""
    matches = _RE_SOURCE_MAPPING_URL.findall(script)
    if not matches:
        return None
    return matches[-1]


def decode_data_url(url: str) -> bytes:
    """Decode an inline ``data:application/json`` source map URL.

    Raises:
        ValueError: If the URL is not a JSON data URL.
    """
    match = _RE_DATA_URL.match(url)
    if not match:
        raise ValueError(f"Unsupported data URL: {url[:40]}")
    is_base64, payload = match.groups()
    if is_base64:
        return base64.b64decode(payload)
    return unquote(payload).encode("utf-8")


def _local_path(url: str) -> Optional[Path]:
    """Return a filesystem path for ``file://`` URLs and plain paths."""
    if url.startswith("file://"):
        return Path(unquote(urlsplit(url).path))
    if "://" not in url and not url.startswith("data:"):
        return Path(url)
    return None


class BundleMapper:
    """Source map backed ``LocationMapper``.

    Scripts, maps and their decoded consumers are cached per instance, so
    one mapper should serve a whole resolution call (primary location plus
    ancestors). Consumers are released by ``aclose()``.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = DEFAULT_TIMEOUT):
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._scripts: dict[str, str] = {}
        self._maps: dict[str, tuple[RawSourceMap, str]] = {}
        self._consumers: dict[str, SourceMapConsumer] = {}

    async def __aenter__(self) -> "BundleMapper":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        for consumer in self._consumers.values():
            consumer.release()
        self._consumers.clear()
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _fetch_text(self, url: str) -> str:
        """Fetch a script or map as text.

        Raises:
            OSError: If a local file can't be read.
            httpx.HTTPError: If the HTTP request fails.
            ValueError: For unsupported URL schemes.
        """
        path = _local_path(url)
        if path is not None:
            return path.read_text(encoding="utf-8")
        scheme = urlsplit(url).scheme
        if scheme not in ("http", "https"):
            raise ValueError(f"Unsupported URL scheme: {url}")
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        response = await self._client.get(url)
        response.raise_for_status()
        return response.text

    async def _get_script(self, url: str) -> str:
        if url not in self._scripts:
            self._scripts[url] = await self._fetch_text(url)
        return self._scripts[url]

    async def _get_source_map(self, script_url: str) -> Optional[tuple[RawSourceMap, str]]:
        """Return the script's map and the URL its sources resolve against."""
        if script_url in self._maps:
            return self._maps[script_url]

        script = await self._get_script(script_url)
        map_url = find_source_mapping_url(script)
        if not map_url:
            logger.debug(f"No sourceMappingURL in {script_url}")
            return None

        if map_url.startswith("data:"):
            raw = decode_source_map(decode_data_url(map_url))
            base_url = script_url
        else:
            base_url = urljoin(script_url, map_url)
            raw = decode_source_map(await self._fetch_text(base_url))

        self._maps[script_url] = (raw, base_url)
        return self._maps[script_url]

    async def get_mapped_location(self, frame: StackFrame) -> Optional[StackFrame]:
        """Map a bundled frame to its original position.

        Returns None when the script carries no map or the position is
        unmapped.

        Raises:
            OSError, httpx.HTTPError, ValueError, msgspec.DecodeError: On
                fetch or decode failures; callers fall back to the raw frame.
        """
        if not frame.file_name or frame.line_number is None:
            return None
        script_url = frame.file_name.split("?")[0]

        loaded = await self._get_source_map(script_url)
        if loaded is None:
            return None
        raw, base_url = loaded

        consumer = self._consumers.get(script_url)
        if consumer is None:
            consumer = await load_consumer(raw)
            self._consumers[script_url] = consumer
        position = consumer.original_position_for(frame.line_number, frame.column_number or 0)

        if position.source is None:
            return None

        source = position.source
        if raw.source_root and "://" not in source and not source.startswith("/"):
            source = raw.source_root.rstrip("/") + "/" + source
        if "://" not in source:
            source = urljoin(base_url, source)

        return StackFrame(
            file_name=source,
            line_number=position.line,
            column_number=position.column,
            function_name=position.name or frame.function_name,
            source=frame.source,
        )

