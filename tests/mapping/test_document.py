"""Document fallback: JSON object -> existing record."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Optional

import pytest

from query_binding.domain.fields import SKIP, Int8, embedded, tags
from query_binding.exceptions import DocumentDecodeError
from query_binding.mapping.document import decode_document


class Code(str):
    @classmethod
    def decode_params(cls, values):
        return cls("-".join(values).upper())


@dataclass
class Range:
    low: int = 0
    high: int = 0


@dataclass
class Audit:
    created_by: str = field(default="", metadata=tags(json="createdBy"))


@dataclass
class Filter:
    name: str = ""
    limit: Int8 = 0
    ratio: float = 0.0
    active: bool = False
    since: Optional[datetime] = None
    note: Optional[str] = None
    blob: bytes = b""
    ids: list[int] = field(default_factory=list)
    pair: tuple[int, int] = (0, 0)
    span: Range = field(default_factory=Range)
    code: Optional[Code] = None
    ignored: str = field(default="keep", metadata=tags(json=SKIP))
    audit: Audit = field(default_factory=Audit, metadata=embedded())


class TestDecodeDocument:
    def test_scalars(self):
        f = decode_document(Filter, Filter(), '{"name": "x", "limit": 5, "ratio": 1, "active": true}')
        assert (f.name, f.limit, f.ratio, f.active) == ("x", 5, 1.0, True)

    def test_merges_into_current(self):
        current = Filter(name="before", limit=3)
        result = decode_document(Filter, current, '{"name": "after"}')
        assert result is current
        assert current.name == "after"
        assert current.limit == 3

    def test_fresh_instance_when_current_missing(self):
        result = decode_document(Filter, None, '{"name": "x"}')
        assert isinstance(result, Filter)
        assert result.name == "x"

    def test_case_insensitive_keys(self):
        assert decode_document(Filter, Filter(), '{"NAME": "x"}').name == "x"

    def test_exact_key_wins(self):
        assert decode_document(Filter, Filter(), '{"Name": "folded", "name": "exact"}').name == "exact"

    def test_unknown_keys_ignored(self):
        assert decode_document(Filter, Filter(), '{"whatever": 1}') == Filter()

    def test_json_tag_and_skip(self):
        f = decode_document(Filter, Filter(), '{"createdBy": "ana", "ignored": "x"}')
        assert f.audit.created_by == "ana"
        assert f.ignored == "keep"

    def test_nested_record_and_collections(self):
        f = decode_document(
            Filter,
            Filter(),
            '{"span": {"low": 1, "high": 9}, "ids": [3, 4], "pair": [1, 2, 3], "blob": "AQI="}',
        )
        assert f.span == Range(1, 9)
        assert f.ids == [3, 4]
        assert f.pair == (1, 2)
        assert f.blob == b"\x01\x02"

    def test_short_fixed_array_zero_fills(self):
        assert decode_document(Filter, Filter(pair=(5, 6)), '{"pair": [1]}').pair == (1, 0)

    def test_timestamp_and_optional(self):
        f = decode_document(Filter, Filter(), '{"since": "2023-01-01T00:00:00Z", "note": "n"}')
        assert f.since == datetime(2023, 1, 1, tzinfo=UTC)
        assert f.note == "n"

    def test_null_clears_optional_and_keeps_others(self):
        f = decode_document(Filter, Filter(name="x", note="n"), '{"note": null, "name": null}')
        assert f.note is None
        assert f.name == "x"

    def test_custom_type_in_document(self):
        assert decode_document(Filter, Filter(), '{"code": "ab"}').code == "AB"
        assert decode_document(Filter, Filter(), '{"code": ["a", "b"]}').code == "A-B"

    @pytest.mark.parametrize(
        "text",
        [
            '{"name": 1}',
            '{"limit": "5"}',
            '{"limit": 1.5}',
            '{"limit": true}',
            '{"limit": 500}',
            '{"active": "true"}',
            '{"ids": "1"}',
            '{"since": "yesterday"}',
            '{"blob": "***"}',
            '{"span": []}',
        ],
    )
    def test_type_mismatch(self, text):
        with pytest.raises(DocumentDecodeError):
            decode_document(Filter, Filter(), text)

    def test_malformed_json(self):
        with pytest.raises(DocumentDecodeError) as exc_info:
            decode_document(Filter, Filter(), "{not json")
        assert exc_info.value.code == "DOCUMENT_DECODE_ERROR"
        assert exc_info.value.__cause__ is not None

    def test_non_object_payload(self):
        with pytest.raises(DocumentDecodeError, match="cannot unmarshal array into Filter"):
            decode_document(Filter, Filter(), "[1, 2]")
