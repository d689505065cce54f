"""
query_binding -- Bind query strings and form values onto dataclasses.

    @dataclass
    class Search:
        term: str = field(default="", metadata=tags(form="q"))
        page: Uint16 = 1
        sort: list[str] = field(default_factory=list)

    params = Search()
    bind("q=shoes&page=2&sort=price&sort=-date", params)

The mapping core (``map_values``) works on any ``Mapping[str, Sequence[str]]``;
``QueryBinding`` adds query parsing and an optional external validator.
"""

from query_binding.binding import (
    QueryBinding,
    StructValidator,
    bind,
    default_binding,
    parse_query,
)
from query_binding.config import BindingConfig, get_binding_config
from query_binding.domain import (
    SKIP,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    ParamDecoder,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
    embedded,
    tags,
)
from query_binding.exceptions import (
    ArityError,
    BindingError,
    ConfigError,
    DocumentDecodeError,
    NotARecordError,
    ParseError,
    UnsupportedFieldTypeError,
)
from query_binding.mapping import map_values

__all__ = [
    "ArityError",
    "BindingConfig",
    "BindingError",
    "ConfigError",
    "DocumentDecodeError",
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "NotARecordError",
    "ParamDecoder",
    "ParseError",
    "QueryBinding",
    "SKIP",
    "StructValidator",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "UnsupportedFieldTypeError",
    "bind",
    "default_binding",
    "embedded",
    "get_binding_config",
    "map_values",
    "parse_query",
    "tags",
]
