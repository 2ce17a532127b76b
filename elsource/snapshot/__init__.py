"""Snapshot loading for captured pages."""

from .loader import Snapshot, SnapshotSpec, decode_snapshot, load_snapshot

__all__ = [
    "Snapshot",
    "SnapshotSpec",
    "decode_snapshot",
    "load_snapshot",
]
