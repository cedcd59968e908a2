# src/catsa_janga/engine/progress.py
"""ProgressSaver: a checkpoint store with save-on-exit attached."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Generic, Self, TypeVar

from catsa_janga.contracts import CheckpointLogger, SnapshotCodec
from catsa_janga.core.checkpoint import CheckpointStore, JsonSnapshotCodec
from catsa_janga.engine.shutdown import ShutdownCoordinator
from catsa_janga.engine.signals import SignalSource

T = TypeVar("T")

if TYPE_CHECKING:
    from catsa_janga.core.config import CheckpointSettings


class ProgressSaver(Generic[T]):
    """Checkpoint store plus shutdown coordinator, built together.

    Construction registers the shutdown handlers immediately, so a
    termination signal arriving at any point afterwards saves the
    provider's current snapshot before the process exits.

    Example:
        state = {"done": []}

        async def main() -> None:
            saver, restored = await ProgressSaver.create(lambda: state, path="progress.json")
            state.update(restored or {})
            for item in work:
                ...
                await saver.save()
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
        handle_shutdown: bool = True,
        signal_source: SignalSource | None = None,
        exit_process: Callable[[int], object] = sys.exit,
    ) -> None:
        """Initialize the saver.

        Args:
            snapshot_provider: Zero-argument callable returning the value to persist
            path: Checkpoint file path
            logger: Logger shared by the store and coordinator
            initial_data: Fallback returned by restore() without a usable checkpoint
            codec: Snapshot codec (default: indented JSON)
            encoding: Text encoding of the checkpoint file
            handle_shutdown: If False, no signal/crash handlers are registered
            signal_source: Event registry (default: process-wide source)
            exit_process: Called with the exit status after the final save
        """
        self.store: CheckpointStore[T] = CheckpointStore(
            snapshot_provider,
            path=path,
            logger=logger,
            initial_data=initial_data,
            codec=codec,
            encoding=encoding,
        )
        self.coordinator: ShutdownCoordinator | None = None
        if handle_shutdown:
            self.coordinator = ShutdownCoordinator(
                self.store,
                logger=logger,
                signal_source=signal_source,
                exit_process=exit_process,
            )

    @classmethod
    def from_settings(
        cls,
        settings: CheckpointSettings,
        snapshot_provider: Callable[[], T],
        *,
        logger: CheckpointLogger | None = None,
        initial_data: T | None = None,
        signal_source: SignalSource | None = None,
        exit_process: Callable[[int], object] = sys.exit,
    ) -> ProgressSaver[T]:
        return cls(
            snapshot_provider,
            path=settings.path,
            logger=logger,
            initial_data=initial_data,
            codec=JsonSnapshotCodec(indent=settings.indent),
            encoding=settings.encoding,
            handle_shutdown=settings.handle_shutdown,
            signal_source=signal_source,
            exit_process=exit_process,
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
        handle_shutdown: bool = True,
        signal_source: SignalSource | None = None,
        exit_process: Callable[[int], object] = sys.exit,
    ) -> tuple[Self, T | None]:
        """Construct a saver and restore from it in one step.

        Must be awaited inside the event loop the process will run, so the
        signal and asyncio exception hooks bind to that loop.

        Returns:
            (saver, restored snapshot or initial data)
        """
        saver = cls(
            snapshot_provider,
            path=path,
            logger=logger,
            initial_data=initial_data,
            codec=codec,
            encoding=encoding,
            handle_shutdown=handle_shutdown,
            signal_source=signal_source,
            exit_process=exit_process,
        )
        return saver, await saver.restore()

    async def restore(self) -> T | None:
        return await self.store.restore()

    async def save(self) -> None:
        await self.store.save()

    async def autosave(self, interval_seconds: float) -> None:
        await self.store.autosave(interval_seconds)

    def close(self) -> None:
        """Unregister the shutdown handlers, if any were registered."""
        if self.coordinator is not None:
            self.coordinator.close()
