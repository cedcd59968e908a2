# src/catsa_janga/core/__init__.py
"""Core infrastructure: Checkpoint store, Configuration, Logging."""

from catsa_janga.core.checkpoint import (
    CheckpointProbe,
    CheckpointStore,
    JsonSnapshotCodec,
    probe_checkpoint,
)
from catsa_janga.core.config import (
    CatsaSettings,
    CheckpointSettings,
    LoggingSettings,
    load_settings,
)
from catsa_janga.core.logging import configure_logging, get_logger

__all__ = [
    "CatsaSettings",
    "CheckpointProbe",
    "CheckpointSettings",
    "CheckpointStore",
    "JsonSnapshotCodec",
    "LoggingSettings",
    "configure_logging",
    "get_logger",
    "load_settings",
    "probe_checkpoint",
]
