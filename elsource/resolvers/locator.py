"""Tree node lookup on rendered elements."""

from typing import Any

from ..models import get_field, is_node_like, own_keys

# Fixed attachment points, tried in order
ATTACHMENT_FIELDS = (
    "_reactInternals",
    "_reactInternalFiber",
    "__reactInternalInstance",
    "_reactInternalInstance",
)

# Attachment keys carrying a runtime-random suffix, e.g. "__reactFiber$x1y2"
ATTACHMENT_PREFIXES = ("__reactFiber$", "_reactFiber$")


def extract_tree_node(element: Any) -> Any:
    """Return the tree node attached to a rendered element, or None.

    Probes the fixed attachment fields first, then scans the element's own
    keys in their natural order for the known prefixes. First match wins.
    """
    if element is None:
        return None

    for field_name in ATTACHMENT_FIELDS:
        node = get_field(element, field_name)
        if is_node_like(node):
            return node

    for key in own_keys(element):
        if key.startswith(ATTACHMENT_PREFIXES):
            node = get_field(element, key)
            if is_node_like(node):
                return node

    return None
