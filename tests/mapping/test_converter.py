"""Converter: one field's raw values -> its new value."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Optional

import pytest

from query_binding.domain.fields import Int8, Uint8
from query_binding.domain.shapes import compile_shape
from query_binding.exceptions import (
    ArityError,
    DocumentDecodeError,
    ParseError,
    UnsupportedFieldTypeError,
)
from query_binding.mapping.converter import convert


class Midnight(datetime):
    """Truncates to the start of the day, which the generic rule never does."""

    @classmethod
    def decode_params(cls, values):
        parsed = datetime.fromisoformat(values[0].replace("Z", "+00:00"))
        return cls(parsed.year, parsed.month, parsed.day, tzinfo=UTC)


class Words(list):
    @classmethod
    def decode_params(cls, values):
        return cls(values)


class Rejecting(str):
    @classmethod
    def decode_params(cls, values):
        raise LookupError(f"unknown code {values[0]}")


@dataclass
class Point:
    x: int = 0
    y: int = 0


def _convert(annotation, values, current=None):
    return convert(compile_shape(annotation), current, values)


class TestScalars:
    def test_string_takes_first_value(self):
        assert _convert(str, ["1", "2"]) == "1"

    def test_string_verbatim(self):
        assert _convert(str, [" padded "]) == " padded "

    def test_integer(self):
        assert _convert(int, ["-5"]) == -5
        assert _convert(Int8, ["-2"]) == -2

    def test_integer_out_of_width(self):
        with pytest.raises(ParseError):
            _convert(Int8, ["300"])

    def test_float(self):
        assert _convert(float, ["11.1"]) == 11.1

    def test_boolean(self):
        assert _convert(bool, ["t"]) is True

    def test_timestamp(self):
        assert _convert(datetime, ["2023-01-01T00:00:00Z"]) == datetime(2023, 1, 1, tzinfo=UTC)

    def test_malformed_integer(self):
        with pytest.raises(ParseError):
            _convert(int, ["abc"])


class TestCustomDecoder:
    def test_custom_wins_over_timestamp_rule(self):
        value = _convert(Midnight, ["2023-01-01T15:30:00Z"])
        assert type(value) is Midnight
        assert value == datetime(2023, 1, 1, tzinfo=UTC)
        assert value != _convert(datetime, ["2023-01-01T15:30:00Z"])

    def test_custom_receives_every_value(self):
        assert _convert(Words, ["a", "b", "c"]) == ["a", "b", "c"]

    def test_custom_behind_optional(self):
        value = _convert(Optional[Midnight], ["2023-05-05T10:00:00Z"])
        assert value == datetime(2023, 5, 5, tzinfo=UTC)

    def test_custom_error_not_wrapped(self):
        with pytest.raises(LookupError, match="unknown code XX"):
            _convert(Rejecting, ["XX"])


class TestOptional:
    def test_allocates_when_none(self):
        assert _convert(Optional[int], ["7"]) == 7

    def test_overwrites_existing(self):
        assert _convert(Optional[int], ["7"], current=3) == 7

    def test_record_pointee_merged_in_place(self):
        existing = Point(x=1, y=2)
        value = _convert(Optional[Point], ['{"y": 5}'], current=existing)
        assert value is existing
        assert existing == Point(x=1, y=5)


class TestFixedSequence:
    def test_fills_in_order(self):
        assert _convert(tuple[int, int, int], ["1", "2", "3"]) == (1, 2, 3)

    def test_short_input_keeps_remaining_slots(self):
        assert _convert(tuple[int, int, int], ["1", "2"]) == (1, 2, 0)
        assert _convert(tuple[int, int, int], ["1"], current=(7, 8, 9)) == (1, 8, 9)

    def test_too_many_values(self):
        with pytest.raises(ArityError) as exc_info:
            _convert(tuple[int, int, int], ["1", "2", "3", "4"])
        assert exc_info.value.capacity == 3
        assert exc_info.value.received == 4
        assert exc_info.value.code == "ARRAY_LENGTH_MISMATCH"

    def test_heterogeneous_slots(self):
        assert _convert(tuple[int, str, bool], ["5", "x", "true"]) == (5, "x", True)

    def test_custom_element_consumes_suffix(self):
        assert _convert(tuple[Words, Words], ["a", "b"]) == (["a", "b"], ["b"])


class TestVariableSequence:
    def test_length_matches_values(self):
        assert _convert(list[int], ["-1", "0", "1"]) == [-1, 0, 1]

    def test_tuple_container(self):
        assert _convert(tuple[str, ...], ["a", "b"]) == ("a", "b")

    def test_optional_elements_allocated(self):
        assert _convert(list[Optional[int]], ["1", "2"]) == [1, 2]

    def test_suffix_recursion_for_nested_sequences(self):
        assert _convert(list[list[int]], ["1", "2", "3"]) == [[1, 2, 3], [2, 3], [3]]

    def test_suffix_recursion_for_custom_elements(self):
        assert _convert(list[Words], ["a", "b", "c"]) == [["a", "b", "c"], ["b", "c"], ["c"]]

    def test_element_error_propagates(self):
        with pytest.raises(ParseError):
            _convert(list[int], ["1", "x"])

    def test_replaces_current(self):
        assert _convert(list[int], ["4"], current=[1, 2, 3]) == [4]


class TestBytes:
    def test_numeric_elements(self):
        assert _convert(bytes, ["1", "2", "65"]) == b"\x01\x02A"

    def test_element_out_of_range(self):
        with pytest.raises(ParseError):
            _convert(bytes, ["256"])

    def test_not_raw_text(self):
        with pytest.raises(ParseError):
            _convert(bytes, ["A"])

    def test_optional_bytes(self):
        assert _convert(Optional[bytes], ["0", "1", "2"]) == b"\x00\x01\x02"

    def test_list_of_uint8_matches_bytes(self):
        assert _convert(list[Uint8], ["0", "1", "255"]) == [0, 1, 255]


class TestRecordDocument:
    def test_decodes_json(self):
        assert _convert(Point, ['{"x": 1, "Y": 2}'], current=Point()) == Point(1, 2)

    def test_only_first_value_used(self):
        assert _convert(Point, ['{"x": 1}', '{"x": 2}'], current=Point()) == Point(1, 0)

    def test_invalid_document(self):
        with pytest.raises(DocumentDecodeError):
            _convert(Point, ["1"], current=Point())


class TestUnsupported:
    def test_raises_when_bound(self):
        with pytest.raises(UnsupportedFieldTypeError) as exc_info:
            _convert(dict[str, str], ["a"])
        assert exc_info.value.code == "UNSUPPORTED_FIELD_TYPE"
