"""CheckpointStore: save and restore a single opaque snapshot file.

The store never raises from restore() or save(). Every failure is pushed
to the logger and resolved by policy:

- absent checkpoint: cold start, return the configured initial data
- corrupt checkpoint: log an error, return the initial data
- unreadable path (permission denied, path is a directory): log an
  error, return the initial data
- failed save (provider raised, value not encodable, write failed): log
  an error and return normally

Callers checkpointing periodically rely on save() never raising.
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Generic, Self, TypeVar

from catsa_janga.contracts import CheckpointLogger, CheckpointState, SnapshotCodec
from catsa_janga.core.checkpoint.serialization import JsonSnapshotCodec
from catsa_janga.core.logging import get_logger

T = TypeVar("T")

if TYPE_CHECKING:
    from catsa_janga.core.config import CheckpointSettings


@dataclass(frozen=True, slots=True)
class CheckpointProbe:
    """Result of inspecting a checkpoint path.

    Attributes:
        state: What the path holds
        path: The inspected path
        data: Decoded snapshot (only meaningful when state is VALID)
        error: Description of the failure for CORRUPT and UNREADABLE
    """

    state: CheckpointState
    path: Path
    data: Any = None
    error: str | None = None


def probe_checkpoint(
    path: str | Path,
    codec: SnapshotCodec | None = None,
    *,
    encoding: str = "utf-8",
) -> CheckpointProbe:
    """Classify a checkpoint path without side effects.

    Blocking; the store runs it in a worker thread.

    Args:
        path: Checkpoint file path
        codec: Codec used to decode the file (default JsonSnapshotCodec)
        encoding: Text encoding of the file

    Returns:
        CheckpointProbe describing the file. Never raises for I/O or
        decoding problems.
    """
    checkpoint_path = Path(path)
    codec = codec if codec is not None else JsonSnapshotCodec()

    try:
        exists = checkpoint_path.exists()
    except OSError as e:
        return CheckpointProbe(
            CheckpointState.UNREADABLE,
            checkpoint_path,
            error=f"cannot check file existence: {e}",
        )
    if not exists:
        return CheckpointProbe(CheckpointState.ABSENT, checkpoint_path)

    try:
        text = checkpoint_path.read_text(encoding=encoding)
    except UnicodeDecodeError as e:
        # Bytes that are not valid text are corrupt content, not an I/O failure
        return CheckpointProbe(CheckpointState.CORRUPT, checkpoint_path, error=str(e))
    except OSError as e:
        return CheckpointProbe(
            CheckpointState.UNREADABLE,
            checkpoint_path,
            error=f"cannot read file: {e}",
        )

    try:
        data = codec.decode(text)
    except Exception as e:
        # Covers custom codecs and RecursionError from deeply nested JSON
        return CheckpointProbe(
            CheckpointState.CORRUPT,
            checkpoint_path,
            error=f"{type(e).__name__}: {e}",
        )

    return CheckpointProbe(CheckpointState.VALID, checkpoint_path, data=data)


class CheckpointStore(Generic[T]):
    """Owns one checkpoint file holding the latest snapshot.

    Configuration is fixed at construction. The snapshot itself is never
    held by the store: save() asks the provider for it each time.

    Example:
        store, state = await CheckpointStore.create(
            lambda: state,
            path="progress.json",
            initial_data={"done": []},
        )
        ...
        await store.save()
    """

    def __init__(
        self,
        snapshot_provider: Callable[[], T],
        *,
        path: str | Path,
        logger: CheckpointLogger | None = None,
        initial_data: T | None = None,
        codec: SnapshotCodec | None = None,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize the store.

        Args:
            snapshot_provider: Zero-argument callable returning the value to
                persist. Called synchronously from save().
            path: Checkpoint file path
            logger: Logger for info/error events (default: structlog logger)
            initial_data: Value returned by restore() when no usable
                checkpoint exists
            codec: Snapshot codec (default: indented JSON)
            encoding: Text encoding of the checkpoint file
        """
        self._snapshot_provider = snapshot_provider
        self._path = Path(path)
        self._logger: CheckpointLogger = logger if logger is not None else get_logger(__name__)
        self._initial_data = initial_data
        self._codec: SnapshotCodec = codec if codec is not None else JsonSnapshotCodec()
        self._encoding = encoding

    @classmethod
    def from_settings(
        cls,
        settings: CheckpointSettings,
        snapshot_provider: Callable[[], T],
        *,
        logger: CheckpointLogger | None = None,
        initial_data: T | None = None,
    ) -> CheckpointStore[T]:
        """Build a store from validated CheckpointSettings."""
        return cls(
            snapshot_provider,
            path=settings.path,
            logger=logger,
            initial_data=initial_data,
            codec=JsonSnapshotCodec(indent=settings.indent),
            encoding=settings.encoding,
        )

    @classmethod
    async def create(
        cls,
        snapshot_provider: Callable[[], T],
        *,
        path: str | Path,
        logger: CheckpointLogger | None = None,
        initial_data: T | None = None,
        codec: SnapshotCodec | None = None,
        encoding: str = "utf-8",
    ) -> tuple[Self, T | None]:
        """Construct a store and restore from it in one step.

        Returns:
            (store, restored snapshot or initial data)
        """
        store = cls(
            snapshot_provider,
            path=path,
            logger=logger,
            initial_data=initial_data,
            codec=codec,
            encoding=encoding,
        )
        return store, await store.restore()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def initial_data(self) -> T | None:
        """A copy of the configured fallback value."""
        return self._fallback()

    def _fallback(self) -> T | None:
        # Callers mutate what restore() hands back; keep the configured value intact
        return copy.deepcopy(self._initial_data)

    async def restore(self) -> T | None:
        """Load the last saved snapshot, falling back to the initial data.

        Returns:
            The restored snapshot, or the initial data (None if none was
            configured) when the file is absent, corrupt or unreadable.
        """
        probe = await asyncio.to_thread(
            probe_checkpoint,
            self._path,
            self._codec,
            encoding=self._encoding,
        )

        if probe.state is CheckpointState.VALID:
            self._logger.info("Progress data successfully restored", path=str(self._path))
            restored: T = probe.data
            return restored

        if probe.state is CheckpointState.CORRUPT:
            self._logger.error(
                "Error restoring progress",
                path=str(self._path),
                error=probe.error,
            )
        elif probe.state is CheckpointState.UNREADABLE:
            self._logger.error(
                "Error accessing checkpoint file",
                path=str(self._path),
                error=probe.error,
            )

        return self._fallback()

    async def save(self) -> None:
        """Write the provider's current snapshot, replacing the file in full.

        Never raises: failures are logged. Concurrent saves are not
        serialized; whichever write completes last wins.
        """
        self._logger.info("Saving progress", path=str(self._path))
        try:
            text = self._codec.encode(self._snapshot_provider())
            await asyncio.to_thread(self._path.write_text, text, encoding=self._encoding)
        except Exception as e:
            # Provider and codec are caller code; any failure must stay inside save()
            self._logger.error(
                "Error saving progress",
                path=str(self._path),
                error=str(e),
                error_type=type(e).__name__,
            )

    async def autosave(self, interval_seconds: float) -> None:
        """Save every ``interval_seconds`` until the task is cancelled.

        Run as a background task:
            task = asyncio.create_task(store.autosave(30))
            ...
            task.cancel()

        Raises:
            ValueError: If interval_seconds is not positive
        """
        if interval_seconds <= 0:
            raise ValueError(f"autosave interval must be positive, got {interval_seconds}")
        while True:
            await asyncio.sleep(interval_seconds)
            await self.save()
