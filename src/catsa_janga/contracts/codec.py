"""Codec protocol for turning snapshots into checkpoint file text."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SnapshotCodec(Protocol):
    """Converts an opaque snapshot to text and back.

    Error handling:
        - encode() raises ValueError or TypeError for values it cannot encode
        - decode() raises ValueError for malformed text. The checkpoint
          store treats any exception from decode() as a corrupt checkpoint
    """

    def encode(self, value: Any) -> str:
        """Serialize a snapshot to text."""
        ...

    def decode(self, text: str) -> Any:
        """Deserialize text produced by encode()."""
        ...
