"""Resolution result types."""

from dataclasses import dataclass
from typing import Optional

from .location import SourceLocation

ERR_INVALID_ELEMENT = "Invalid element provided"
ERR_NO_TREE_NODE = "No React Fiber node found on element"
ERR_NO_DEBUG_DATA = "No debug stack information found in fiber tree"
ERR_UNRESOLVED = "No debug stack information found on Fiber node"
ERR_INVALID_LOCATION = "Invalid source location data found"


@dataclass
class SourceLocationResult:
    """Tagged success/failure result of locating an element's source."""

    success: bool
    data: Optional[SourceLocation] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: SourceLocation) -> "SourceLocationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "SourceLocationResult":
        return cls(success=False, error=error)
