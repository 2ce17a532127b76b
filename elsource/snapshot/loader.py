"""Snapshot loading.

A snapshot captures rendered elements and component-tree nodes from a page
as flat lists that reference each other by id. Loading wires them into
linked mappings shaped like the runtime objects, so the resolvers can walk
them exactly as they would walk live data.

Uses msgspec for typed JSON decoding.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import msgspec

logger = logging.getLogger(__name__)

DEFAULT_NODE_KEY = "__reactFiber$snapshot"


class TypeSpec(msgspec.Struct, rename={"display_name": "displayName", "render_name": "renderName"}, omit_defaults=True):
    """Component type descriptor."""

    name: Optional[str] = None
    display_name: Optional[str] = None
    render_name: Optional[str] = None  # name of the function wrapped by a wrapper type


class DebugSourceSpec(msgspec.Struct, rename="camel", omit_defaults=True):
    """Simple ``{fileName, lineNumber, columnNumber}`` descriptor."""

    file_name: str = ""
    line_number: int = 0
    column_number: int = 0


class ElementSpec(msgspec.Struct, omit_defaults=True):
    """Rendered element in a snapshot."""

    id: str
    tag: Optional[str] = None
    parent: Optional[str] = None
    node: Optional[str] = None
    node_key: str = DEFAULT_NODE_KEY


class NodeSpec(msgspec.Struct, omit_defaults=True):
    """Component-tree node in a snapshot; links are node ids."""

    id: str
    tag: Optional[int] = None
    name: Optional[str] = None
    type: Optional[TypeSpec] = None
    env: Optional[str] = None
    debug_stack: Optional[str] = None
    debug_source: Optional[DebugSourceSpec] = None
    debug_owner: Optional[str] = None
    owner: Optional[str] = None
    parent: Optional[str] = msgspec.field(default=None, name="return")
    child: Optional[str] = None
    sibling: Optional[str] = None


class SnapshotSpec(msgspec.Struct, omit_defaults=True):
    """Full snapshot document."""

    version: str = "1.0"
    url: Optional[str] = None
    elements: list[ElementSpec] = []
    nodes: list[NodeSpec] = []


# Create reusable decoder for performance
_decoder = msgspec.json.Decoder(SnapshotSpec)


def _type_mapping(spec: TypeSpec) -> dict[str, Any]:
    node_type: dict[str, Any] = {}
    if spec.name:
        node_type["name"] = spec.name
    if spec.display_name:
        node_type["displayName"] = spec.display_name
    if spec.render_name:
        node_type["render"] = {"name": spec.render_name}
    return node_type


class Snapshot:
    """Linked view over a decoded snapshot."""

    def __init__(self, spec: SnapshotSpec):
        self.version = spec.version
        self.url = spec.url
        self.nodes: dict[str, dict[str, Any]] = {}
        self.elements: dict[str, dict[str, Any]] = {}
        self._build(spec)

    def _build(self, spec: SnapshotSpec) -> None:
        for node_spec in spec.nodes:
            node: dict[str, Any] = {"id": node_spec.id}
            if node_spec.tag is not None:
                node["tag"] = node_spec.tag
            if node_spec.name:
                node["name"] = node_spec.name
            if node_spec.type is not None:
                node["type"] = _type_mapping(node_spec.type)
            if node_spec.env:
                node["env"] = node_spec.env
            if node_spec.debug_stack:
                node["_debugStack"] = {"stack": node_spec.debug_stack}
            if node_spec.debug_source is not None:
                node["_debugSource"] = {
                    "fileName": node_spec.debug_source.file_name,
                    "lineNumber": node_spec.debug_source.line_number,
                    "columnNumber": node_spec.debug_source.column_number,
                }
            self.nodes[node_spec.id] = node

        for node_spec in spec.nodes:
            node = self.nodes[node_spec.id]
            for field_name, ref in (
                ("_debugOwner", node_spec.debug_owner),
                ("owner", node_spec.owner),
                ("return", node_spec.parent),
                ("child", node_spec.child),
                ("sibling", node_spec.sibling),
            ):
                if ref is None:
                    continue
                target = self.nodes.get(ref)
                if target is None:
                    logger.debug(f"Dangling {field_name} reference {ref} on node {node_spec.id}")
                    continue
                node[field_name] = target

        for element_spec in spec.elements:
            element: dict[str, Any] = {"id": element_spec.id}
            if element_spec.tag:
                element["tagName"] = element_spec.tag.upper()
            self.elements[element_spec.id] = element

        for element_spec in spec.elements:
            element = self.elements[element_spec.id]
            if element_spec.parent is not None:
                parent = self.elements.get(element_spec.parent)
                if parent is not None:
                    element["parentElement"] = parent
            if element_spec.node is not None:
                node = self.nodes.get(element_spec.node)
                if node is not None:
                    element[element_spec.node_key] = node

    def element(self, element_id: str) -> Optional[dict[str, Any]]:
        return self.elements.get(element_id)

    def node(self, node_id: str) -> Optional[dict[str, Any]]:
        return self.nodes.get(node_id)


def decode_snapshot(data: Union[bytes, str]) -> Snapshot:
    """Decode snapshot JSON.

    Raises:
        msgspec.DecodeError: If the data is not a valid snapshot.
    """
    return Snapshot(_decoder.decode(data))


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """Load a snapshot from file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        msgspec.DecodeError: If the file is not a valid snapshot.
    """
    with open(path, "rb") as f:
        return Snapshot(_decoder.decode(f.read()))
