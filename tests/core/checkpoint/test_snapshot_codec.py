"""Tests for the JSON snapshot codec."""

import json
from datetime import UTC, datetime, timedelta, timezone

import pytest

from catsa_janga.contracts import SnapshotCodec
from catsa_janga.core.checkpoint.serialization import JsonSnapshotCodec, snapshot_dumps, snapshot_loads


class TestSnapshotDumps:
    def test_default_indent_is_two_spaces(self) -> None:
        assert snapshot_dumps({"a": [1]}) == '{\n  "a": [\n    1\n  ]\n}'

    def test_indent_none_is_single_line(self) -> None:
        assert snapshot_dumps({"a": 1}, indent=None) == '{"a": 1}'

    def test_non_ascii_is_written_verbatim(self) -> None:
        assert "ĉapelo" in snapshot_dumps({"word": "ĉapelo"})

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_floats_rejected(self, bad: float) -> None:
        with pytest.raises(ValueError):
            snapshot_dumps({"nested": [bad]})

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(TypeError):
            snapshot_dumps({"thing": object()})

    def test_tuples_become_lists(self) -> None:
        assert snapshot_loads(snapshot_dumps({"pair": (1, 2)})) == {"pair": [1, 2]}

    def test_datetime_written_as_envelope(self) -> None:
        dt = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        data = json.loads(snapshot_dumps({"at": dt}))

        assert data == {"at": {"__catsa_type__": "datetime", "__catsa_value__": dt.isoformat()}}


class TestSnapshotLoads:
    def test_datetime_round_trip(self) -> None:
        dt = datetime(2024, 5, 1, 12, 30, 15, tzinfo=timezone(timedelta(hours=3)))

        assert snapshot_loads(snapshot_dumps({"at": dt})) == {"at": dt}

    def test_naive_datetime_stays_naive(self) -> None:
        naive = datetime(2024, 1, 2, 3, 4, 5)  # noqa: DTZ001 - exercising naive input

        restored = snapshot_loads(snapshot_dumps({"at": naive}))

        assert restored == {"at": naive}
        assert restored["at"].tzinfo is None

    def test_bad_datetime_envelope_is_malformed(self) -> None:
        text = json.dumps({"__catsa_type__": "datetime", "__catsa_value__": "yesterday"})

        with pytest.raises(ValueError):
            snapshot_loads(text)

    def test_user_dict_with_reserved_key_survives(self) -> None:
        data = {"__catsa_type__": "datetime", "__catsa_value__": "2024-01-01T00:00:00+00:00"}

        assert snapshot_loads(snapshot_dumps(data)) == data

    def test_nested_reserved_key_survives(self) -> None:
        data = {"outer": [{"__catsa_type__": "mine", "x": 1}]}

        assert snapshot_loads(snapshot_dumps(data)) == data

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity", '{"a": NaN}'])
    def test_non_finite_literals_rejected(self, literal: str) -> None:
        with pytest.raises(ValueError):
            snapshot_loads(literal)

    def test_malformed_text_raises_value_error(self) -> None:
        with pytest.raises(ValueError):
            snapshot_loads("{ this is not valid JSON }")

    def test_plain_json_from_other_tools_is_accepted(self) -> None:
        assert snapshot_loads('{"items":[1,2,3],"value":"test"}') == {"items": [1, 2, 3], "value": "test"}


class TestJsonSnapshotCodec:
    def test_satisfies_codec_protocol(self) -> None:
        assert isinstance(JsonSnapshotCodec(), SnapshotCodec)

    def test_indent_is_configurable(self) -> None:
        codec = JsonSnapshotCodec(indent=4)

        assert codec.indent == 4
        assert codec.encode({"a": 1}) == '{\n    "a": 1\n}'

    def test_round_trip(self) -> None:
        codec = JsonSnapshotCodec()
        value = {"items": [1, 2, 3], "value": "test", "none": None, "flag": False}

        assert codec.decode(codec.encode(value)) == value
