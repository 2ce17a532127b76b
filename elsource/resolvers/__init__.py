"""Resolution stages for element source lookup."""

from .locator import extract_tree_node
from .descriptor import (
    find_node_with_debug_payload,
    get_debug_payload,
    has_debug_payload,
    resolve_component_name,
    resolve_descriptor_node,
)
from .stack_parser import parse_stack
from .stack import StackFrameResolver, is_server_location, normalize_file_path, strip_query
from .server import resolve_server_location
from .pipeline import ResolutionPipeline
from .ancestors import AncestorChainBuilder

__all__ = [
    "extract_tree_node",
    "find_node_with_debug_payload",
    "get_debug_payload",
    "has_debug_payload",
    "resolve_component_name",
    "resolve_descriptor_node",
    "parse_stack",
    "StackFrameResolver",
    "is_server_location",
    "strip_query",
    "normalize_file_path",
    "resolve_server_location",
    "ResolutionPipeline",
    "AncestorChainBuilder",
]
