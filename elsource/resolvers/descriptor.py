"""Debug descriptor extraction.

Finds the tree node carrying a debug payload (captured stack or simple
descriptor) and resolves the display name of the component that created
it. Two different link sets are walked here:

- physical links (``return``/``sibling``) to find a node with a payload;
- creator links (``_debugOwner``) to find who caused the node to exist.
"""

import logging
import re
from typing import Any, Awaitable, Callable, Optional

from ..models import (
    DEFAULT_MAX_DEPTH,
    DebugPayload,
    DescriptorPayload,
    StackPayload,
    get_field,
    is_node_like,
    is_wrapper,
)
from .stack_parser import parse_stack, stack_text

logger = logging.getLogger(__name__)

STACK_FIELDS = ("_debugStack", "debugStack")
DESCRIPTOR_FIELDS = ("_debugSource", "debugSource")
CREATOR_FIELD = "_debugOwner"

_RE_VENDORED = re.compile(r"(?:^|[/\\])node_modules(?:[/\\]|$)")

# Async lookup of the file a node was defined in
FileResolver = Callable[[Any], Awaitable[Optional[str]]]


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return 0


def get_creator(node: Any, creator_field: str = CREATOR_FIELD) -> Any:
    """Return the node's creator if it looks like a node, else None."""
    creator = get_field(node, creator_field)
    return creator if is_node_like(creator) else None


def get_debug_payload(node: Any) -> Optional[DebugPayload]:
    """Extract the authoritative debug payload of a node.

    Captured stacks win over simple descriptors.
    """
    if node is None:
        return None
    for field_name in STACK_FIELDS:
        captured = get_field(node, field_name)
        if captured:
            text = stack_text(captured)
            if text:
                return StackPayload(stack=text)

    for field_name in DESCRIPTOR_FIELDS:
        source = get_field(node, field_name)
        if source:
            file = get_field(source, "fileName") or get_field(source, "file") or ""
            line = get_field(source, "lineNumber")
            if line is None:
                line = get_field(source, "line")
            column = get_field(source, "columnNumber")
            if column is None:
                column = get_field(source, "column")
            return DescriptorPayload(
                file=file if isinstance(file, str) else "",
                line=_as_int(line),
                column=_as_int(column),
            )
    return None


def has_debug_payload(node: Any) -> bool:
    return get_debug_payload(node) is not None


def find_node_with_debug_payload(
    node: Any,
    max_depth: int = DEFAULT_MAX_DEPTH,
    _visited: Optional[set[int]] = None,
) -> Any:
    """Ascend from ``node`` to the first node carrying a debug payload.

    Follows ``return`` links; a sibling subtree is tried only once the
    parent chain is exhausted. A wrapper with a payload defers to its
    creator when the creator (or its ancestors) yields a node.

    Returns:
        The node with a payload, or None if none is found within budget.
    """
    visited = _visited if _visited is not None else set()
    current = node
    depth = 0

    while is_node_like(current) and depth < max_depth:
        if id(current) in visited:
            break
        visited.add(id(current))

        if has_debug_payload(current):
            creator = get_creator(current)
            if is_wrapper(current) and creator is not None:
                found = find_node_with_debug_payload(creator, max_depth - depth, visited)
                if found is not None:
                    return found
            return current

        parent = get_field(current, "return")
        if is_node_like(parent):
            current = parent
            depth += 1
            continue

        sibling = get_field(current, "sibling")
        if is_node_like(sibling):
            found = find_node_with_debug_payload(sibling, max_depth - depth, visited)
            if found is not None:
                return found

        break

    return None


def resolve_descriptor_node(node: Any) -> Any:
    """Substitute wrappers by their creators before reading a payload.

    A wrapper's own payload points inside the wrapper machinery, so the
    creator's payload is used instead, transitively. When the chosen node
    was itself created by a wrapper, the wrapper chain is skipped the same
    way and its first non-wrapper creator is used.
    """
    visited = {id(node)}
    current = node

    while is_wrapper(current):
        creator = get_creator(current)
        if creator is None or id(creator) in visited:
            break
        visited.add(id(creator))
        current = creator

    owner = get_creator(current)
    if owner is not None and is_wrapper(owner):
        while is_wrapper(owner):
            creator = get_creator(owner)
            if creator is None or id(creator) in visited:
                break
            visited.add(id(creator))
            owner = creator
        current = owner

    return current


def _type_name(node_type: Any, *fields: str) -> Optional[str]:
    for field_name in fields:
        value = get_field(node_type, field_name)
        if isinstance(value, str) and value:
            return value
    return None


def _wrapper_name(node: Any) -> Optional[str]:
    """Explicit display name, or the name of the wrapped render function."""
    node_type = get_field(node, "type")
    if node_type is None:
        return None
    name = _type_name(node_type, "displayName")
    if name:
        return name
    render = get_field(node_type, "render")
    if render is None:
        return None
    return _type_name(render, "displayName", "name") or _callable_name(render)


def _callable_name(value: Any) -> Optional[str]:
    if callable(value):
        name = getattr(value, "__name__", None)
        if isinstance(name, str) and name and name != "<lambda>":
            return name
    return None


def _declared_name(node: Any) -> Optional[str]:
    name = get_field(node, "name")
    if isinstance(name, str) and name:
        return name
    node_type = get_field(node, "type")
    if node_type is None:
        return None
    if isinstance(node_type, str):
        return None  # host element tag, not a component name
    return _type_name(node_type, "displayName", "name") or _callable_name(node_type)


def node_file(node: Any) -> Optional[str]:
    """Raw (unmapped) file of a node's own payload, without query string."""
    payload = get_debug_payload(node)
    if isinstance(payload, DescriptorPayload):
        return payload.file.split("?")[0] or None
    if isinstance(payload, StackPayload):
        frames = parse_stack(payload.stack)
        if len(frames) >= 2 and frames[1].file_name:
            return frames[1].file_name.split("?")[0]
    return None


def is_vendored_path(path: Optional[str]) -> bool:
    """True when the path lies under a third-party dependency directory."""
    return bool(path) and _RE_VENDORED.search(path) is not None


async def raw_node_file(node: Any) -> Optional[str]:
    return node_file(node)


async def resolve_component_name(
    node: Any,
    max_depth: int = DEFAULT_MAX_DEPTH,
    creator_field: str = CREATOR_FIELD,
    resolve_file: Optional[FileResolver] = None,
) -> Optional[str]:
    """Name of the component that created ``node``.

    Walks the creator chain starting at the node's creator. Wrappers are
    named by their display name or wrapped function; other nodes by their
    declared name. Nameless wrappers and nodes defined under vendored
    paths are skipped. Server-side creator chains link through ``owner``
    instead of ``_debugOwner``; ``creator_field`` selects the link.

    The vendored check runs on the file returned by ``resolve_file``,
    normally the creator's source-mapped location. Without one, the raw
    payload file is checked.
    """
    resolve_file = resolve_file or raw_node_file
    visited = {id(node)}
    current = get_creator(node, creator_field)
    depth = 0

    while current is not None and depth < max_depth:
        if id(current) in visited:
            break
        visited.add(id(current))

        # Nameless wrappers fall through to their creator
        name = _wrapper_name(current) or _declared_name(current)

        if name and is_vendored_path(await resolve_file(current)):
            logger.debug(f"Skipping vendored component {name}")
            name = None

        if name:
            return name

        current = get_creator(current, creator_field)
        depth += 1

    return None
