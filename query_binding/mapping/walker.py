"""
Structural walker: populate a dataclass instance from a source collection.

Fields are visited in declaration order and assigned in place. The first
error aborts the walk; fields assigned before it keep their new values.
Embedded records are walked against the same source collection, so their
fields share the parent's key namespace.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from typing import Any

from query_binding.domain.fields import SKIP
from query_binding.domain.shapes import (
    CustomShape,
    FieldPlan,
    OptionalShape,
    record_plan,
    zero_value,
)
from query_binding.exceptions import BindingError, NotARecordError
from query_binding.logging_config import get_logger
from query_binding.mapping.converter import convert

logger = get_logger("mapping.walker")

DEFAULT_TAG = "form"

SourceCollection = Mapping[str, Sequence[str]]


def map_values(source: SourceCollection, target: Any, tag_name: str = DEFAULT_TAG) -> None:
    """
    Populate ``target`` from ``source``.

    Args:
        source: Key to ordered raw values, e.g. a parsed query string.
        target: Dataclass instance, mutated in place.
        tag_name: Metadata key holding per-field key overrides. An empty
            tag name binds every field by its declared name.

    Raises:
        NotARecordError: ``target`` is not a dataclass instance.
        BindingError: A field failed to convert; ``field_path`` names it.
        Exception: Whatever a custom decoder raised, unchanged.
    """
    if isinstance(target, type) or not dataclasses.is_dataclass(target):
        raise NotARecordError(type(target).__name__)

    record_type = type(target).__name__
    logger.debug(
        "mapping_started",
        extra={"record_type": record_type, "source_keys": sorted(source)},
    )
    try:
        assigned = _walk(source, target, tag_name, "")
    except Exception as exc:
        logger.warning(
            "mapping_failed",
            extra={
                "record_type": record_type,
                "field_path": getattr(exc, "field_path", None),
                "error_code": getattr(exc, "code", type(exc).__name__),
            },
        )
        raise
    logger.debug(
        "mapping_completed",
        extra={"record_type": record_type, "fields_assigned": assigned},
    )


def _walk(source: SourceCollection, record: Any, tag_name: str, prefix: str) -> int:
    """Bind every field of ``record``; return how many were assigned."""
    assigned = 0
    for fp in record_plan(type(record), tag_name).fields:
        if not fp.writable or fp.key == SKIP:
            continue
        path = prefix + fp.name
        if fp.embedded:
            assigned += _walk_embedded(source, record, fp, tag_name, path)
            continue
        values = _values_for(source, fp.key)
        if not fp.key or not values:
            continue
        _assign(record, fp, values, path)
        assigned += 1
    return assigned


def _walk_embedded(
    source: SourceCollection,
    record: Any,
    fp: FieldPlan,
    tag_name: str,
    path: str,
) -> int:
    inner = fp.shape.inner if isinstance(fp.shape, OptionalShape) else fp.shape

    if isinstance(inner, CustomShape):
        # The decoder runs even when the key is absent and sees an empty list
        values = _values_for(source, fp.key or fp.name)
        _assign(record, fp, values, path)
        return 1 if values else 0

    current = getattr(record, fp.name, None)
    if current is not None:
        return _walk(source, current, tag_name, path + ".")

    # Optional embedded record: attach only once something was bound into it
    fresh = zero_value(inner)
    assigned = _walk(source, fresh, tag_name, path + ".")
    if assigned:
        setattr(record, fp.name, fresh)
    return assigned


def _assign(record: Any, fp: FieldPlan, values: Sequence[str], path: str) -> None:
    try:
        value = convert(fp.shape, getattr(record, fp.name, None), values)
    except BindingError as exc:
        if exc.field_path is None:
            exc.field_path = path
        raise
    setattr(record, fp.name, value)


def _values_for(source: SourceCollection, key: str) -> Sequence[str]:
    values = source.get(key)
    if not values:
        return ()
    if isinstance(values, str):
        return (values,)
    return values
