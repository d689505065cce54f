"""
Document fallback: decode one raw value as a JSON object into a record.

Used for non-embedded record fields, where the single raw value bound to the
field's key is treated as a self-contained document (``?filter={"a":1}``).

Keys match the field's ``json`` override, else its name; an exact match wins
over a case-insensitive one. Unknown keys are ignored. ``null`` clears
optional fields and leaves every other field as it was. Surplus elements of a
JSON array bound to a fixed-size tuple are dropped; missing ones are zeroed.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from query_binding.domain.shapes import (
    BooleanShape,
    BytesShape,
    CustomShape,
    FixedSequenceShape,
    FloatShape,
    IntegerShape,
    OptionalShape,
    RecordShape,
    SequenceShape,
    Shape,
    StringShape,
    TimestampShape,
    UnsupportedShape,
    record_plan,
    zero_value,
)
from query_binding.domain.fields import SKIP
from query_binding.exceptions import DocumentDecodeError, ParseError
from query_binding.mapping.scalars import (
    check_integer_range,
    narrow_float,
    parse_timestamp,
)

DOCUMENT_TAG = "json"


def decode_document(record_type: type, current: Any, text: str) -> Any:
    """Decode ``text`` into ``current`` (or a fresh ``record_type``) and return it."""
    name = record_type.__name__
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DocumentDecodeError(name, str(exc)) from exc
    if not isinstance(payload, dict):
        raise DocumentDecodeError(
            name, f"cannot unmarshal {_json_kind(payload)} into {name}"
        )
    target = current if isinstance(current, record_type) else zero_value(RecordShape(record_type))
    _merge_object(target, payload)
    return target


def _merge_object(target: Any, payload: dict[str, Any]) -> None:
    folded: dict[str, Any] = {}
    for key, value in payload.items():
        folded.setdefault(key.casefold(), value)

    for fp in record_plan(type(target), DOCUMENT_TAG).fields:
        if not fp.writable or fp.key == SKIP:
            continue
        current = getattr(target, fp.name, None)
        if fp.embedded and not _is_custom(fp.shape):
            inner = fp.shape.inner if isinstance(fp.shape, OptionalShape) else fp.shape
            if current is None:
                current = zero_value(inner)
                setattr(target, fp.name, current)
            _merge_object(current, payload)
            continue
        if fp.key in payload:
            raw = payload[fp.key]
        elif fp.key.casefold() in folded:
            raw = folded[fp.key.casefold()]
        else:
            continue
        setattr(target, fp.name, _from_json(fp.shape, current, raw, fp.name))


def _from_json(shape: Shape, current: Any, raw: Any, where: str) -> Any:
    if raw is None:
        return None if isinstance(shape, OptionalShape) else current

    if isinstance(shape, CustomShape):
        if isinstance(raw, str):
            return shape.cls.decode_params([raw])
        if isinstance(raw, list) and all(isinstance(v, str) for v in raw):
            return shape.cls.decode_params(raw)
        raise _mismatch(raw, shape.cls.__name__, where)

    if isinstance(shape, StringShape):
        if not isinstance(raw, str):
            raise _mismatch(raw, "string", where)
        return raw

    if isinstance(shape, IntegerShape):
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise _mismatch(raw, "integer", where)
        try:
            return check_integer_range(raw, shape.width, str(raw))
        except ParseError as exc:
            raise DocumentDecodeError(where, str(exc)) from exc

    if isinstance(shape, FloatShape):
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise _mismatch(raw, "float", where)
        try:
            return narrow_float(float(raw), shape.bits, str(raw))
        except (ParseError, OverflowError) as exc:
            raise DocumentDecodeError(where, str(exc)) from exc

    if isinstance(shape, BooleanShape):
        if not isinstance(raw, bool):
            raise _mismatch(raw, "bool", where)
        return raw

    if isinstance(shape, TimestampShape):
        if not isinstance(raw, str):
            raise _mismatch(raw, "timestamp", where)
        try:
            return parse_timestamp(raw, shape.cls)
        except ParseError as exc:
            raise DocumentDecodeError(where, str(exc)) from exc

    if isinstance(shape, BytesShape):
        if not isinstance(raw, str):
            raise _mismatch(raw, "bytes", where)
        try:
            return base64.b64decode(raw, validate=True)
        except binascii.Error as exc:
            raise DocumentDecodeError(where, str(exc)) from exc

    if isinstance(shape, OptionalShape):
        pointee = current if current is not None else zero_value(shape.inner)
        return _from_json(shape.inner, pointee, raw, where)

    if isinstance(shape, FixedSequenceShape):
        if not isinstance(raw, list):
            raise _mismatch(raw, "array", where)
        slots = []
        for i, item_shape in enumerate(shape.items):
            zero = zero_value(item_shape)
            slots.append(_from_json(item_shape, zero, raw[i], where) if i < len(raw) else zero)
        return tuple(slots)

    if isinstance(shape, SequenceShape):
        if not isinstance(raw, list):
            raise _mismatch(raw, "array", where)
        return shape.container(
            _from_json(shape.item, zero_value(shape.item), item, where) for item in raw
        )

    if isinstance(shape, RecordShape):
        if not isinstance(raw, dict):
            raise _mismatch(raw, shape.cls.__name__, where)
        target = current if isinstance(current, shape.cls) else zero_value(shape)
        _merge_object(target, raw)
        return target

    if isinstance(shape, UnsupportedShape):
        raise DocumentDecodeError(where, f"unsupported field type: {shape.annotation}")

    raise TypeError(f"unknown shape: {shape!r}")


def _is_custom(shape: Shape) -> bool:
    if isinstance(shape, OptionalShape):
        shape = shape.inner
    return isinstance(shape, CustomShape)


def _json_kind(raw: Any) -> str:
    if isinstance(raw, bool):
        return "bool"
    if isinstance(raw, (int, float)):
        return "number"
    if isinstance(raw, str):
        return "string"
    if isinstance(raw, list):
        return "array"
    if isinstance(raw, dict):
        return "object"
    return "null"


def _mismatch(raw: Any, expected: str, where: str) -> DocumentDecodeError:
    return DocumentDecodeError(
        where, f"cannot unmarshal {_json_kind(raw)} into field {where} of type {expected}"
    )
