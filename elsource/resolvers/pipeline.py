"""Single-element resolution pipeline.

element -> tree node -> node with payload -> descriptor node
        -> frame resolution -> server map resolution -> SourceLocation
"""

from typing import Any, Optional

from ..models import (
    LocateOptions,
    SourceLocation,
    get_field,
    validate_source_location,
)
from ..sourcemap import LocationMapper
from .descriptor import (
    CREATOR_FIELD,
    find_node_with_debug_payload,
    get_debug_payload,
    resolve_component_name,
    resolve_descriptor_node,
)
from .locator import extract_tree_node
from .server import resolve_server_location
from .snippet import read_source_snippet
from .stack import StackFrameResolver, is_server_location


def element_tag(element: Any) -> Optional[str]:
    tag = get_field(element, "tagName") or get_field(element, "tag_name")
    return tag if isinstance(tag, str) else None


class ResolutionPipeline:
    """Resolve tree nodes and elements to source locations.

    One pipeline serves a whole ``locate_element_source`` call so the
    bundler mapper's caches are shared between the element and its
    ancestors.
    """

    def __init__(self, mapper: Optional[LocationMapper] = None, options: Optional[LocateOptions] = None):
        self.options = options or LocateOptions()
        self.frames = StackFrameResolver(mapper)

    async def resolve_target(
        self, target: Any, max_depth: int, creator_field: str = CREATOR_FIELD
    ) -> Optional[SourceLocation]:
        """Resolve a descriptor node (wrappers already substituted)."""
        payload = get_debug_payload(target)
        if payload is None:
            return None

        name = await resolve_component_name(
            target, max_depth, creator_field=creator_field, resolve_file=self.resolve_file
        )
        location = await self.frames.resolve(payload, name)
        if location is None:
            return None

        if self.options.resolve_server and is_server_location(location.file):
            location = await resolve_server_location(location)

        if self.options.include_source:
            location.source_code = read_source_snippet(
                location.file, location.line, self.options.source_context
            )
        return location

    async def resolve_file(self, node: Any) -> Optional[str]:
        """Resolved (mapped) file of a node's own payload, or None."""
        location = await self.frames.resolve(get_debug_payload(node))
        if location is None:
            return None
        if self.options.resolve_server and is_server_location(location.file):
            location = await resolve_server_location(location)
        return location.file

    async def resolve_node(
        self, node: Any, max_depth: int, creator_field: str = CREATOR_FIELD
    ) -> Optional[SourceLocation]:
        return await self.resolve_target(resolve_descriptor_node(node), max_depth, creator_field)

    async def resolve_element(self, element: Any, max_depth: int) -> Optional[SourceLocation]:
        """Full pipeline for one element; None when any stage finds nothing."""
        node = extract_tree_node(element)
        if node is None:
            return None
        found = find_node_with_debug_payload(node, max_depth)
        if found is None:
            return None
        location = await self.resolve_node(found, max_depth)
        if not validate_source_location(location):
            return None
        location.tag_name = element_tag(element)
        return location
