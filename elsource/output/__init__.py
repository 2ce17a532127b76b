"""Output formatting module."""

from .json_formatter import location_to_dict, print_json, result_to_dict
from .tree import print_location_tree

__all__ = [
    "print_json",
    "print_location_tree",
    "location_to_dict",
    "result_to_dict",
]
