"""Shared contracts: enums and protocols used across catsa-janga."""

from catsa_janga.contracts.codec import SnapshotCodec
from catsa_janga.contracts.enums import CheckpointState, ProcessEvent, ShutdownState
from catsa_janga.contracts.logger import CheckpointLogger, NullLogger

__all__ = [
    "CheckpointLogger",
    "CheckpointState",
    "NullLogger",
    "ProcessEvent",
    "ShutdownState",
    "SnapshotCodec",
]
