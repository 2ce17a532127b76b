"""elsource - Map rendered UI elements back to component source."""

from .locate import locate_element_source, locate_element_source_sync, resolve_server_location
from .models import LocateOptions, SourceLocation, SourceLocationResult, NodeKind
from .resolvers import normalize_file_path
from .snapshot import Snapshot, load_snapshot

__version__ = "0.1.0"

__all__ = [
    "locate_element_source",
    "locate_element_source_sync",
    "resolve_server_location",
    "normalize_file_path",
    "LocateOptions",
    "SourceLocation",
    "SourceLocationResult",
    "NodeKind",
    "Snapshot",
    "load_snapshot",
]
