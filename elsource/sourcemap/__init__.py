"""Source map loading, decoding and bundle mapping."""

from .loader import RawSourceMap, SectionSpec, OffsetSpec, decode_source_map, load_source_map
from .consumer import (
    OriginalPosition,
    SourceMapConsumer,
    decode_vlq,
    ensure_decoder_initialized,
    load_consumer,
    open_consumer,
)
from .bundle import BundleMapper, LocationMapper, find_source_mapping_url

__all__ = [
    "RawSourceMap",
    "SectionSpec",
    "OffsetSpec",
    "decode_source_map",
    "load_source_map",
    "OriginalPosition",
    "SourceMapConsumer",
    "decode_vlq",
    "ensure_decoder_initialized",
    "load_consumer",
    "open_consumer",
    "BundleMapper",
    "LocationMapper",
    "find_source_mapping_url",
]
