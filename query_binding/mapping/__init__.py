"""Mapping engine: source collection -> populated record. Pure, no I/O."""

from query_binding.mapping.converter import convert
from query_binding.mapping.document import decode_document
from query_binding.mapping.walker import DEFAULT_TAG, SourceCollection, map_values

__all__ = [
    "DEFAULT_TAG",
    "SourceCollection",
    "convert",
    "decode_document",
    "map_values",
]
