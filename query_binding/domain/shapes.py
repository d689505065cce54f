"""
Conversion shapes -- the closed set of field types the converter knows.

Every field annotation is compiled once into exactly one shape. The
converter dispatches on the shape class, never on the live annotation, so
the choice between the custom decoder, the generic rules, and record
recursion is made here and only here.

Compilation order:
    1. ``Annotated`` width markers (``Int8``, ``Float32``, ...)
    2. ``Optional[T]`` / ``T | None``
    3. ``list[T]``, ``tuple[T, ...]``, ``tuple[A, B, C]``
    4. classes exposing ``decode_params`` (custom decoder)
    5. scalars, ``datetime``, dataclasses
    6. anything else -> ``UnsupportedShape``
"""

from __future__ import annotations

import dataclasses
import types
import typing
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import lru_cache
from typing import Annotated, Any, Union, get_args, get_origin

from query_binding.domain.fields import (
    EMBEDDED,
    PLATFORM_INT,
    FloatWidth,
    IntWidth,
    is_param_decoder,
)

# Zero value of a timestamp field.
ZERO_TIME = datetime(1, 1, 1, tzinfo=UTC)


# =============================================================================
# Shapes
# =============================================================================


@dataclass(frozen=True)
class StringShape:
    pass


@dataclass(frozen=True)
class IntegerShape:
    width: IntWidth = PLATFORM_INT


@dataclass(frozen=True)
class FloatShape:
    bits: int = 64


@dataclass(frozen=True)
class BooleanShape:
    pass


@dataclass(frozen=True)
class BytesShape:
    """Sequence of unsigned 8-bit numbers, one per raw value."""


@dataclass(frozen=True)
class TimestampShape:
    cls: type = datetime


@dataclass(frozen=True)
class OptionalShape:
    """Nilable slot; allocated with the inner zero value on first write."""

    inner: Shape


@dataclass(frozen=True)
class FixedSequenceShape:
    """Fixed-arity tuple; one shape per slot."""

    items: tuple[Shape, ...]


@dataclass(frozen=True)
class SequenceShape:
    item: Shape
    container: type = list


@dataclass(frozen=True)
class RecordShape:
    cls: type


@dataclass(frozen=True)
class CustomShape:
    cls: type


@dataclass(frozen=True)
class UnsupportedShape:
    annotation: str


Shape = Union[
    StringShape,
    IntegerShape,
    FloatShape,
    BooleanShape,
    BytesShape,
    TimestampShape,
    OptionalShape,
    FixedSequenceShape,
    SequenceShape,
    RecordShape,
    CustomShape,
    UnsupportedShape,
]

_NONE_TYPE = type(None)


def compile_shape(annotation: Any) -> Shape:
    """Compile a resolved type annotation into its conversion shape."""
    origin = get_origin(annotation)

    if origin is Annotated:
        base, *metadata = get_args(annotation)
        for marker in metadata:
            if isinstance(marker, IntWidth) and base is int:
                return IntegerShape(marker)
            if isinstance(marker, FloatWidth) and base is float:
                return FloatShape(marker.bits)
        return compile_shape(base)

    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        present = [a for a in args if a is not _NONE_TYPE]
        if len(present) == 1 and len(args) == 2:
            return OptionalShape(compile_shape(present[0]))
        return UnsupportedShape(repr(annotation))

    if origin is list:
        args = get_args(annotation)
        return SequenceShape(compile_shape(args[0]) if args else StringShape(), list)

    if origin is tuple:
        args = get_args(annotation)
        if len(args) == 2 and args[1] is Ellipsis:
            return SequenceShape(compile_shape(args[0]), tuple)
        return FixedSequenceShape(tuple(compile_shape(a) for a in args))

    if origin is not None:
        # A parameterised generic such as Box[int] decodes through Box itself
        if is_param_decoder(origin):
            return CustomShape(origin)
        return UnsupportedShape(repr(annotation))

    if is_param_decoder(annotation):
        return CustomShape(annotation)

    if annotation is str:
        return StringShape()
    if annotation is bool:
        return BooleanShape()
    if annotation is int:
        return IntegerShape()
    if annotation is float:
        return FloatShape()
    if annotation is bytes:
        return BytesShape()
    if annotation is list:
        return SequenceShape(StringShape(), list)
    if annotation is tuple:
        return SequenceShape(StringShape(), tuple)
    if isinstance(annotation, type) and issubclass(annotation, datetime):
        return TimestampShape(annotation)
    if isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
        return RecordShape(annotation)
    return UnsupportedShape(getattr(annotation, "__name__", repr(annotation)))


# =============================================================================
# Zero values
# =============================================================================


def zero_value(shape: Shape) -> Any:
    """The value a freshly allocated slot of ``shape`` holds."""
    if isinstance(shape, StringShape):
        return ""
    if isinstance(shape, IntegerShape):
        return 0
    if isinstance(shape, FloatShape):
        return 0.0
    if isinstance(shape, BooleanShape):
        return False
    if isinstance(shape, BytesShape):
        return b""
    if isinstance(shape, TimestampShape):
        return ZERO_TIME
    if isinstance(shape, FixedSequenceShape):
        return tuple(zero_value(s) for s in shape.items)
    if isinstance(shape, SequenceShape):
        return shape.container()
    if isinstance(shape, RecordShape):
        return zero_record(shape.cls)
    if isinstance(shape, CustomShape):
        return _zero_custom(shape.cls)
    # OptionalShape, UnsupportedShape
    return None


def zero_record(cls: type) -> Any:
    """Instantiate ``cls`` filling every required init field with its zero value."""
    hints = _type_hints(cls)
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            kwargs[f.name] = zero_value(compile_shape(hints[f.name]))
    return cls(**kwargs)


def _zero_custom(cls: type) -> Any:
    # Custom types need not be constructible without arguments; their
    # decoder builds the real value, so an empty slot is None until then.
    try:
        return cls()
    except TypeError:
        return None


# =============================================================================
# Record plans
# =============================================================================


@dataclass(frozen=True)
class FieldPlan:
    """How one declared field is bound."""

    name: str
    key: str
    shape: Shape
    embedded: bool = False
    writable: bool = True


@dataclass(frozen=True)
class RecordPlan:
    record_type: type
    fields: tuple[FieldPlan, ...]


@lru_cache(maxsize=None)
def record_plan(cls: type, tag_name: str) -> RecordPlan:
    """
    Compile the binding plan for a dataclass under a given tag name.

    The key is the field's override for ``tag_name`` when one is declared,
    otherwise the field name. Fields named with a leading underscore and all
    fields of a frozen dataclass are not writable. The embedded marker is
    honoured only on fields whose shape is a record or a custom decoder.
    """
    hints = _type_hints(cls)
    frozen = cls.__dataclass_params__.frozen
    plans: list[FieldPlan] = []
    for f in dataclasses.fields(cls):
        override = f.metadata.get(tag_name) if tag_name else None
        shape = compile_shape(hints[f.name])
        plans.append(
            FieldPlan(
                name=f.name,
                key=f.name if override is None else override,
                shape=shape,
                embedded=bool(f.metadata.get(EMBEDDED)) and _embeddable(shape),
                writable=not frozen and not f.name.startswith("_"),
            )
        )
    return RecordPlan(record_type=cls, fields=tuple(plans))


def _embeddable(shape: Shape) -> bool:
    if isinstance(shape, OptionalShape):
        shape = shape.inner
    return isinstance(shape, (RecordShape, CustomShape))


def _type_hints(cls: type) -> dict[str, Any]:
    return typing.get_type_hints(cls, include_extras=True)
