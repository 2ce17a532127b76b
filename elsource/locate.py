"""Public entry points.

Both operations return a value for every input; failures are reported
through ``SourceLocationResult`` or an unchanged location.
"""

import asyncio
import logging
from typing import Any, Optional

from .models import (
    ERR_INVALID_ELEMENT,
    ERR_INVALID_LOCATION,
    ERR_NO_DEBUG_DATA,
    ERR_NO_TREE_NODE,
    ERR_UNRESOLVED,
    LocateOptions,
    SourceLocation,
    SourceLocationResult,
    is_node_like,
    validate_source_location,
)
from .resolvers import (
    AncestorChainBuilder,
    ResolutionPipeline,
    extract_tree_node,
    find_node_with_debug_payload,
    resolve_descriptor_node,
)
from .resolvers.pipeline import element_tag
from .resolvers.server import resolve_server_location as _resolve_server_location
from .sourcemap import BundleMapper, LocationMapper

logger = logging.getLogger(__name__)


async def _locate(element: Any, node: Any, options: LocateOptions, mapper: LocationMapper) -> SourceLocationResult:
    depth = options.depth
    pipeline = ResolutionPipeline(mapper, options)

    target = resolve_descriptor_node(node)
    location = await pipeline.resolve_target(target, depth)
    if location is None:
        return SourceLocationResult.fail(ERR_UNRESOLVED)
    if not validate_source_location(location):
        return SourceLocationResult.fail(ERR_INVALID_LOCATION)

    location.tag_name = element_tag(element)

    if options.include_ancestors:
        parent = await AncestorChainBuilder(pipeline).build(element, target, depth)
        if parent is not None:
            location.parent = parent

    return SourceLocationResult.ok(location)


async def locate_element_source(
    element: Any, options: Optional[LocateOptions] = None
) -> SourceLocationResult:
    """Locate the source of a rendered element.

    Args:
        element: Rendered element (mapping or object) carrying a tree node.
        options: Resolution options; ``max_depth`` bounds both the descriptor
            ascent and the ancestor chain.

    Returns:
        SourceLocationResult with the location (ancestors linked through
        ``parent``) or an error message. Never raises.
    """
    options = options or LocateOptions()
    try:
        if not is_node_like(element):
            return SourceLocationResult.fail(ERR_INVALID_ELEMENT)

        node = extract_tree_node(element)
        if node is None:
            return SourceLocationResult.fail(ERR_NO_TREE_NODE)

        found = find_node_with_debug_payload(node, options.depth)
        if found is None:
            return SourceLocationResult.fail(ERR_NO_DEBUG_DATA)

        if options.mapper is not None:
            return await _locate(element, found, options, options.mapper)
        async with BundleMapper() as mapper:
            return await _locate(element, found, options, mapper)
    except Exception as e:
        logger.debug(f"Source location extraction failed: {e!r}")
        return SourceLocationResult.fail(f"Error extracting source location: {str(e) or 'Unknown error'}")


async def resolve_server_location(location: SourceLocation) -> SourceLocation:
    """Map a server pseudo-URL location to its original source file.

    Locations without the ``about://<origin>/Server/`` prefix, and any
    location that can't be resolved, are returned unchanged.
    """
    return await _resolve_server_location(location)


def locate_element_source_sync(
    element: Any, options: Optional[LocateOptions] = None
) -> SourceLocationResult:
    """Blocking wrapper around ``locate_element_source``."""
    return asyncio.run(locate_element_source(element, options))
