"""Source snippet extraction around a resolved location."""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

logger = logging.getLogger(__name__)


def local_source_path(file: str) -> Optional[Path]:
    """Filesystem path for absolute paths and ``file://`` URLs, else None."""
    if file.startswith("file://"):
        return Path(unquote(urlsplit(file).path))
    if "://" in file:
        return None
    path = Path(file)
    return path if path.is_absolute() else None


def _read_lines(path: Path) -> list[str]:
    with open(path, "r", encoding="utf-8") as f:
        return f.read().splitlines()


def read_source_snippet(file: str, line: int, context: int = 2) -> Optional[str]:
    """Return ``context`` lines around 1-based ``line``, or None.

    Only local files are read; served URLs yield None.
    """
    path = local_source_path(file)
    if path is None or line <= 0:
        return None
    try:
        lines = _read_lines(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Cannot read source snippet from {path}: {e}")
        return None
    if line > len(lines):
        return None
    start = max(1, line - context)
    end = min(len(lines), line + context)
    return "\n".join(lines[start - 1:end])
