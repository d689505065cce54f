"""
query_binding.domain -- Field declarations and conversion shapes.

ZERO I/O. Nothing here touches a source collection; it only describes
what a record looks like to the binder.
"""

from query_binding.domain.fields import (
    EMBEDDED,
    SKIP,
    Float32,
    Float64,
    FloatWidth,
    Int8,
    Int16,
    Int32,
    Int64,
    IntWidth,
    ParamDecoder,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
    embedded,
    is_param_decoder,
    tags,
)
from query_binding.domain.shapes import (
    ZERO_TIME,
    FieldPlan,
    RecordPlan,
    Shape,
    compile_shape,
    record_plan,
    zero_record,
    zero_value,
)

__all__ = [
    "EMBEDDED",
    "SKIP",
    "ZERO_TIME",
    "FieldPlan",
    "Float32",
    "Float64",
    "FloatWidth",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "IntWidth",
    "ParamDecoder",
    "RecordPlan",
    "Shape",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "compile_shape",
    "embedded",
    "is_param_decoder",
    "record_plan",
    "tags",
    "zero_record",
    "zero_value",
]
