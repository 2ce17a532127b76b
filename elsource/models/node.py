"""Component-tree node model.

Tree nodes and rendered elements are owned by the render runtime and
arrive either as plain mappings (decoded snapshots) or as attribute
objects. Everything here only reads them.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, Union


def get_field(obj: Any, name: str) -> Any:
    """Read a field from a mapping or an attribute object.

    Returns None when the field is missing. Field names follow the runtime
    (``_debugOwner``, ``return``...), so attribute objects are read with
    ``getattr`` rather than dotted access.
    """
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def own_keys(obj: Any) -> list[str]:
    """Return the object's own field names in natural order."""
    if isinstance(obj, Mapping):
        return [key for key in obj.keys() if isinstance(key, str)]
    try:
        return list(vars(obj).keys())
    except TypeError:
        return []


def is_node_like(value: Any) -> bool:
    """True for values that can stand for a tree node (not scalars)."""
    if value is None:
        return False
    return not isinstance(value, (str, bytes, int, float, bool))


class NodeKind(IntEnum):
    """Closed set of tree node kinds, keyed by the runtime's numeric tag."""

    UNKNOWN = -1
    FUNCTION_COMPONENT = 0
    CLASS_COMPONENT = 1
    HOST_ROOT = 3
    HOST_PORTAL = 4
    HOST_COMPONENT = 5
    HOST_TEXT = 6
    FRAGMENT = 7
    CONTEXT_PROVIDER = 10
    FORWARD_REF = 11
    MEMO = 14
    SIMPLE_MEMO = 15
    HOST_HOISTABLE = 26
    HOST_SINGLETON = 27

    @property
    def is_wrapper(self) -> bool:
        """Pass-through node whose own debug payload must not be trusted."""
        return self is NodeKind.FORWARD_REF

    @property
    def is_host(self) -> bool:
        return self in (
            NodeKind.HOST_COMPONENT,
            NodeKind.HOST_TEXT,
            NodeKind.HOST_HOISTABLE,
            NodeKind.HOST_SINGLETON,
        )

    @classmethod
    def of(cls, node: Any) -> "NodeKind":
        tag = get_field(node, "tag")
        if isinstance(tag, bool) or not isinstance(tag, int):
            return cls.UNKNOWN
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN


def is_wrapper(node: Any) -> bool:
    return node is not None and NodeKind.of(node).is_wrapper


@dataclass
class StackPayload:
    """Captured multi-frame stack trace text."""

    stack: str


@dataclass
class DescriptorPayload:
    """Simple ``{file, line, column}`` debug descriptor (older runtimes)."""

    file: str
    line: int
    column: int


DebugPayload = Union[StackPayload, DescriptorPayload]
