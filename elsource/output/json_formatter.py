"""JSON output for source location chains.

Keys follow the runtime's camelCase naming so the output can be fed back
to browser tooling unchanged.
"""

from typing import Any

import msgspec

from ..models import SourceLocation, SourceLocationResult


def location_to_dict(location: SourceLocation, include_parent: bool = True) -> dict:
    """Convert a location chain to a JSON-serializable dict.

    Args:
        location: Location to convert.
        include_parent: Recurse into ``parent``.
    """
    data: dict = {
        "file": location.file,
        "line": location.line,
        "column": location.column,
        "componentName": location.component_name,
        "tagName": location.tag_name,
    }
    if location.source_code is not None:
        data["sourceCode"] = location.source_code
    if include_parent and location.parent is not None:
        data["parent"] = location_to_dict(location.parent)
    return data


def result_to_dict(result: SourceLocationResult) -> dict:
    """Convert a tagged result to its ``{success, data|error}`` dict."""
    if result.success and result.data is not None:
        return {"success": True, "data": location_to_dict(result.data)}
    return {"success": False, "error": result.error}


def print_json(data: Any):
    """Print data as indented JSON to stdout."""
    print(msgspec.json.format(msgspec.json.encode(data), indent=2).decode("utf-8"))
