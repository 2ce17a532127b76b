"""Data models for elsource."""

from .location import SourceLocation, validate_source_location
from .frame import StackFrame
from .node import (
    NodeKind,
    StackPayload,
    DescriptorPayload,
    DebugPayload,
    get_field,
    own_keys,
    is_node_like,
    is_wrapper,
)
from .options import LocateOptions, DEFAULT_MAX_DEPTH
from .results import (
    SourceLocationResult,
    ERR_INVALID_ELEMENT,
    ERR_NO_TREE_NODE,
    ERR_NO_DEBUG_DATA,
    ERR_UNRESOLVED,
    ERR_INVALID_LOCATION,
)

__all__ = [
    "SourceLocation",
    "validate_source_location",
    "StackFrame",
    "NodeKind",
    "StackPayload",
    "DescriptorPayload",
    "DebugPayload",
    "get_field",
    "own_keys",
    "is_node_like",
    "is_wrapper",
    "LocateOptions",
    "DEFAULT_MAX_DEPTH",
    "SourceLocationResult",
    "ERR_INVALID_ELEMENT",
    "ERR_NO_TREE_NODE",
    "ERR_NO_DEBUG_DATA",
    "ERR_UNRESOLVED",
    "ERR_INVALID_LOCATION",
]
