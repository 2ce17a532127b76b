"""Ancestor chain construction.

Two strategies, chosen once from the first ancestor:

- creator chain: follow creator links of the tree node. Server components
  carry an ``env`` marker; when it reads "Server" the chain continues
  through ``owner`` after the first hop.
- physical chain: follow the element's parent elements and resolve each
  through the full pipeline, skipping parents that resolve to nothing.

Both stop at the depth budget, at a missing link, or on a revisit.
"""

import logging
from typing import Any, Optional

from ..models import SourceLocation, get_field, is_node_like, validate_source_location
from .descriptor import CREATOR_FIELD, get_creator
from .pipeline import ResolutionPipeline

logger = logging.getLogger(__name__)

ENV_FIELD = "env"
SERVER_ENV = "Server"
SERVER_CREATOR_FIELD = "owner"
PARENT_ELEMENT_FIELDS = ("parentElement", "parent_element")


def parent_element(element: Any) -> Any:
    for field_name in PARENT_ELEMENT_FIELDS:
        parent = get_field(element, field_name)
        if is_node_like(parent):
            return parent
    return None


def environment_marker(node: Any) -> Optional[str]:
    env = get_field(node, ENV_FIELD)
    return env if isinstance(env, str) and env else None


def link_chain(locations: list[SourceLocation]) -> Optional[SourceLocation]:
    """Link locations through ``parent`` and return the head."""
    for child, parent in zip(locations, locations[1:]):
        child.parent = parent
    return locations[0] if locations else None


class AncestorChainBuilder:
    """Build the bounded chain of ancestor source locations."""

    def __init__(self, pipeline: ResolutionPipeline):
        self.pipeline = pipeline

    async def build(self, element: Any, node: Any, max_depth: int) -> Optional[SourceLocation]:
        """Return the nearest ancestor location with the rest linked behind it.

        Args:
            element: Rendered element that produced the primary location.
            node: Descriptor node that produced the primary location.
            max_depth: Upper bound on the chain length.
        """
        if max_depth <= 0:
            return None

        first = get_creator(node) if node is not None else None
        env = environment_marker(first)
        if first is not None and env is not None:
            logger.debug(f"Creator-chain strategy (env={env})")
            return await self._creator_chain(node, first, max_depth, server=env == SERVER_ENV)

        return await self._physical_chain(element, max_depth)

    async def _creator_chain(
        self, node: Any, first: Any, max_depth: int, server: bool
    ) -> Optional[SourceLocation]:
        link_field = SERVER_CREATOR_FIELD if server else CREATOR_FIELD
        visited = {id(node)}
        locations: list[SourceLocation] = []
        current = first
        budget = max_depth

        while current is not None and budget > 0:
            if id(current) in visited:
                logger.debug("Creator chain revisits a node, stopping")
                break
            visited.add(id(current))
            budget -= 1

            location = await self.pipeline.resolve_node(current, max_depth, creator_field=link_field)
            if validate_source_location(location):
                locations.append(location)

            current = get_creator(current, link_field)

        return link_chain(locations)

    async def _physical_chain(self, element: Any, max_depth: int) -> Optional[SourceLocation]:
        visited = {id(element)}
        locations: list[SourceLocation] = []
        current = element
        budget = max_depth

        while budget > 0:
            parent = parent_element(current)
            if parent is None or id(parent) in visited:
                break
            visited.add(id(parent))
            budget -= 1

            location = await self.pipeline.resolve_element(parent, max_depth)
            if location is not None:
                locations.append(location)
            current = parent

        return link_chain(locations)
