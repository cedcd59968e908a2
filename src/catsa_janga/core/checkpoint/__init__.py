"""Checkpoint subsystem for crash resumption.

Provides:
- CheckpointStore: Save and restore a single snapshot file
- probe_checkpoint/CheckpointProbe: Side-effect-free inspection of a checkpoint path
- JsonSnapshotCodec: Default codec (indented JSON, datetime-preserving)
- snapshot_dumps/snapshot_loads: The codec's functions
"""

from catsa_janga.core.checkpoint.serialization import JsonSnapshotCodec, snapshot_dumps, snapshot_loads
from catsa_janga.core.checkpoint.store import CheckpointProbe, CheckpointStore, probe_checkpoint

__all__ = [
    "CheckpointProbe",
    "CheckpointStore",
    "JsonSnapshotCodec",
    "probe_checkpoint",
    "snapshot_dumps",
    "snapshot_loads",
]
