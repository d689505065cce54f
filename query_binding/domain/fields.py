"""
Field declaration helpers for bindable records.

A bindable record is a plain ``dataclass``. Per-field binding information
lives in ``dataclasses.field(metadata=...)``:

    @dataclass
    class Search:
        term: str = field(default="", metadata=tags(form="q"))
        secret: str = field(default="", metadata=tags(form=SKIP))
        paging: Paging = field(default_factory=Paging, metadata=embedded())
        limit: Uint16 = 0

Numeric widths are expressed with ``Annotated`` aliases so that range
checks know the declared width.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Annotated, Any, Protocol, Self, runtime_checkable

# Key override that removes a field from binding entirely.
SKIP = "-"

# Metadata key carrying the embedding marker.
EMBEDDED = "query_binding.embedded"


def tags(**keys: str) -> dict[str, Any]:
    """Build field metadata holding one source-key override per tag name."""
    return dict(keys)


def embedded(**keys: str) -> dict[str, Any]:
    """Field metadata marking a record field as flattened into its parent."""
    return {EMBEDDED: True, **keys}


# =============================================================================
# Numeric widths
# =============================================================================


@dataclass(frozen=True)
class IntWidth:
    """Declared width of an integer field."""

    bits: int
    signed: bool = True

    @property
    def bounds(self) -> tuple[int, int]:
        if self.signed:
            return -(1 << (self.bits - 1)), (1 << (self.bits - 1)) - 1
        return 0, (1 << self.bits) - 1


@dataclass(frozen=True)
class FloatWidth:
    """Declared width of a floating point field (32 or 64)."""

    bits: int

    def __post_init__(self) -> None:
        if self.bits not in (32, 64):
            raise ValueError(f"float width must be 32 or 64, got {self.bits}")


Int8 = Annotated[int, IntWidth(8)]
Int16 = Annotated[int, IntWidth(16)]
Int32 = Annotated[int, IntWidth(32)]
Int64 = Annotated[int, IntWidth(64)]
Uint = Annotated[int, IntWidth(64, signed=False)]
Uint8 = Annotated[int, IntWidth(8, signed=False)]
Uint16 = Annotated[int, IntWidth(16, signed=False)]
Uint32 = Annotated[int, IntWidth(32, signed=False)]
Uint64 = Annotated[int, IntWidth(64, signed=False)]
Float32 = Annotated[float, FloatWidth(32)]
Float64 = Annotated[float, FloatWidth(64)]

# Width used for a bare ``int`` annotation.
PLATFORM_INT = IntWidth(64)


# =============================================================================
# Custom decoder capability
# =============================================================================


@runtime_checkable
class ParamDecoder(Protocol):
    """
    A type that decodes itself from the raw values bound to its key.

    ``decode_params`` receives every value bound to the field (for sequence
    elements, the remaining values starting at the element's index) and
    returns a fully initialized instance. Whatever it raises reaches the
    caller unchanged.
    """

    @classmethod
    def decode_params(cls, values: Sequence[str]) -> Self: ...


def is_param_decoder(tp: Any) -> bool:
    """True when ``tp`` is a class exposing a callable ``decode_params``."""
    return isinstance(tp, type) and callable(getattr(tp, "decode_params", None))
