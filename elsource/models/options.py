"""Options for source location extraction."""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..sourcemap.bundle import LocationMapper

DEFAULT_MAX_DEPTH = 10


@dataclass
class LocateOptions:
    """Configuration for a single ``locate_element_source`` call.

    ``max_depth`` bounds both the descriptor ascent and the ancestor chain,
    so a result carries at most ``max_depth`` ancestors. Zero or negative
    values do not disable the walk: they fall back to ``DEFAULT_MAX_DEPTH``.
    Use ``include_ancestors=False`` to skip the chain.
    """

    max_depth: int = DEFAULT_MAX_DEPTH  # bounds descriptor ascent and ancestor chain
    include_source: bool = False
    source_context: int = 2
    resolve_server: bool = True
    include_ancestors: bool = True
    # Bundler mapping service; a BundleMapper is opened per call when unset
    mapper: Optional["LocationMapper"] = None

    @property
    def depth(self) -> int:
        """Effective depth budget; non-positive values fall back to the default."""
        return self.max_depth if self.max_depth and self.max_depth > 0 else DEFAULT_MAX_DEPTH
