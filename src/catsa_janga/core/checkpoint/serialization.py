"""JSON codec for checkpoint files.

Checkpoints are plain UTF-8 JSON indented for humans to read, with no
header or version field. A file written by hand or by another tool loads
as long as it is ordinary JSON.

Snapshots go through one packing pass before json.dumps() and one
unpacking pass after json.loads():

- datetime values become ``{"__catsa_type__": "datetime", "__catsa_value__":
  "<iso>"}`` and come back as datetime. Naive values stay naive and aware
  values keep their offset.
- a user dict that itself has a ``__catsa_type__`` key is wrapped as
  ``{"__catsa_type__": "escaped_dict", "__catsa_value__": {...}}`` so it is
  never read back as an envelope.
- tuples become lists.

NaN and Infinity are refused both ways: json.dumps(allow_nan=False) on
write, and the ``NaN``/``Infinity`` literals on read.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

TYPE_KEY = "__catsa_type__"
VALUE_KEY = "__catsa_value__"


def _pack(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return {TYPE_KEY: "datetime", VALUE_KEY: obj.isoformat()}
    if isinstance(obj, dict):
        packed = {key: _pack(value) for key, value in obj.items()}
        if TYPE_KEY in packed:
            return {TYPE_KEY: "escaped_dict", VALUE_KEY: packed}
        return packed
    if isinstance(obj, list | tuple):
        return [_pack(item) for item in obj]
    return obj


def _unpack(obj: Any) -> Any:
    if isinstance(obj, list):
        return [_unpack(item) for item in obj]
    if not isinstance(obj, dict):
        return obj

    # Only an exact two-key dict is an envelope; anything else is user data
    if obj.keys() == {TYPE_KEY, VALUE_KEY}:
        kind, payload = obj[TYPE_KEY], obj[VALUE_KEY]
        if kind == "datetime" and isinstance(payload, str):
            return datetime.fromisoformat(payload)
        if kind == "escaped_dict" and isinstance(payload, dict):
            return {key: _unpack(value) for key, value in payload.items()}
    return {key: _unpack(value) for key, value in obj.items()}


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-finite number {name} is not allowed in a checkpoint")


def snapshot_dumps(obj: Any, *, indent: int | None = 2) -> str:
    """Serialize a snapshot to checkpoint JSON.

    Args:
        obj: Snapshot value (JSON-compatible data, datetimes allowed)
        indent: Indentation width; None for a single line

    Raises:
        ValueError: If the value contains NaN or Infinity
        TypeError: If the value contains a type JSON cannot represent
    """
    return json.dumps(_pack(obj), allow_nan=False, ensure_ascii=False, indent=indent)


def snapshot_loads(s: str) -> Any:
    """Deserialize checkpoint JSON.

    Raises:
        ValueError: If the text is not valid checkpoint JSON, including a
            datetime envelope whose value is not an ISO timestamp
    """
    return _unpack(json.loads(s, parse_constant=_reject_constant))


class JsonSnapshotCodec:
    """Default SnapshotCodec: indented JSON with datetime envelopes."""

    def __init__(self, indent: int | None = 2) -> None:
        self._indent = indent

    @property
    def indent(self) -> int | None:
        return self._indent

    def encode(self, value: Any) -> str:
        return snapshot_dumps(value, indent=self._indent)

    def decode(self, text: str) -> Any:
        return snapshot_loads(text)
