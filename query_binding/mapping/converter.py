"""
Scalar/collection converter: raw values -> one field's new value.

``convert(shape, current, values)`` returns the value to store in the field.
``values`` is non-empty except for embedded custom-decoded fields, whose
decoder is called with an empty list when the key is absent.

Sequence elements are converted from the suffix ``values[i:]``, not from
``values[i]`` alone. Simple elements read only the first value of their
suffix; a custom-decoded or nested-sequence element sees every value from
its index onwards. One recursive function therefore covers both cases.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from query_binding.domain.fields import IntWidth
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
    zero_value,
)
from query_binding.exceptions import ArityError, UnsupportedFieldTypeError
from query_binding.mapping.document import decode_document
from query_binding.mapping.scalars import (
    parse_boolean,
    parse_float,
    parse_integer,
    parse_timestamp,
)

_BYTE = IntegerShape(IntWidth(8, signed=False))


def convert(shape: Shape, current: Any, values: Sequence[str]) -> Any:
    """Convert ``values`` into the value a field of ``shape`` should hold."""
    return _CONVERTERS[type(shape)](shape, current, values)


def _custom(shape: CustomShape, current: Any, values: Sequence[str]) -> Any:
    return shape.cls.decode_params(values)


def _string(shape: StringShape, current: Any, values: Sequence[str]) -> str:
    return values[0]


def _integer(shape: IntegerShape, current: Any, values: Sequence[str]) -> int:
    return parse_integer(values[0], shape.width)


def _float(shape: FloatShape, current: Any, values: Sequence[str]) -> float:
    return parse_float(values[0], shape.bits)


def _boolean(shape: BooleanShape, current: Any, values: Sequence[str]) -> bool:
    return parse_boolean(values[0])


def _timestamp(shape: TimestampShape, current: Any, values: Sequence[str]) -> Any:
    return parse_timestamp(values[0], shape.cls)


def _record(shape: RecordShape, current: Any, values: Sequence[str]) -> Any:
    return decode_document(shape.cls, current, values[0])


def _optional(shape: OptionalShape, current: Any, values: Sequence[str]) -> Any:
    pointee = current if current is not None else zero_value(shape.inner)
    return convert(shape.inner, pointee, values)


def _fixed(shape: FixedSequenceShape, current: Any, values: Sequence[str]) -> tuple:
    arity = len(shape.items)
    if len(values) > arity:
        raise ArityError(arity, len(values))
    if isinstance(current, tuple) and len(current) == arity:
        slots = list(current)
    else:
        slots = [zero_value(s) for s in shape.items]
    for i in range(len(values)):
        slots[i] = convert(shape.items[i], slots[i], values[i:])
    return tuple(slots)


def _sequence(shape: SequenceShape, current: Any, values: Sequence[str]) -> Any:
    return shape.container(
        convert(shape.item, zero_value(shape.item), values[i:])
        for i in range(len(values))
    )


def _bytes(shape: BytesShape, current: Any, values: Sequence[str]) -> bytes:
    return bytes(convert(_BYTE, 0, values[i:]) for i in range(len(values)))


def _unsupported(shape: UnsupportedShape, current: Any, values: Sequence[str]) -> Any:
    raise UnsupportedFieldTypeError(shape.annotation)


_CONVERTERS: dict[type, Callable[[Any, Any, Sequence[str]], Any]] = {
    CustomShape: _custom,
    StringShape: _string,
    IntegerShape: _integer,
    FloatShape: _float,
    BooleanShape: _boolean,
    TimestampShape: _timestamp,
    RecordShape: _record,
    OptionalShape: _optional,
    FixedSequenceShape: _fixed,
    SequenceShape: _sequence,
    BytesShape: _bytes,
    UnsupportedShape: _unsupported,
}
