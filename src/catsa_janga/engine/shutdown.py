# src/catsa_janga/engine/shutdown.py
"""Save-then-exit handling for termination signals and crashes.

ShutdownCoordinator listens on a SignalSource for SIGINT, SIGTERM,
uncaught exceptions and unhandled asyncio failures. The first event
moves it from ACTIVE to SHUTTING_DOWN, awaits one checkpoint save, and
exits the process: status 0 for a signal, 1 for a crash. Later events
are no-ops.
"""

from __future__ import annotations

import asyncio
import sys
import threading
from collections.abc import Callable
from typing import Any, Protocol

from catsa_janga.contracts import CheckpointLogger, ProcessEvent, ShutdownState
from catsa_janga.core.logging import get_logger
from catsa_janga.engine.signals import Listener, SignalSource, get_process_signal_source

EXIT_SIGNAL = 0
EXIT_CRASH = 1


class SupportsSave(Protocol):
    """Anything with an awaitable, non-raising save()."""

    async def save(self) -> None: ...


class ShutdownCoordinator:
    """Runs exactly one save-then-exit sequence per coordinator.

    Registration with the signal source happens in __init__ and stays in
    effect until close().

    Scheduling:
        If an event loop is running on the current thread, the sequence is
        scheduled onto it with call_soon_threadsafe so a signal delivered
        while the loop waits on I/O still wakes it. Otherwise the sequence
        runs to completion inline via asyncio.run(), which is the case for
        sys.excepthook and for signals in synchronous programs.

    Example:
        store = CheckpointStore(lambda: state, path="progress.json")
        coordinator = ShutdownCoordinator(store)
    """

    def __init__(
        self,
        target: SupportsSave,
        *,
        logger: CheckpointLogger | None = None,
        signal_source: SignalSource | None = None,
        exit_process: Callable[[int], object] = sys.exit,
    ) -> None:
        """Register shutdown listeners.

        Args:
            target: Object whose save() persists the checkpoint
            logger: Logger for shutdown events (default: structlog logger)
            signal_source: Event registry (default: process-wide source)
            exit_process: Called with the exit status after saving
        """
        self._target = target
        self._logger: CheckpointLogger = logger if logger is not None else get_logger(__name__)
        self._source = signal_source if signal_source is not None else get_process_signal_source()
        self._exit_process = exit_process
        self._state = ShutdownState.ACTIVE
        self._state_lock = threading.Lock()
        self._task: asyncio.Task[None] | None = None

        self._listeners: dict[ProcessEvent, Listener] = {
            ProcessEvent.INTERRUPT: self._on_interrupt,
            ProcessEvent.TERMINATE: self._on_terminate,
            ProcessEvent.UNCAUGHT_EXCEPTION: self._on_uncaught_exception,
            ProcessEvent.UNHANDLED_REJECTION: self._on_unhandled_rejection,
        }
        for event, listener in self._listeners.items():
            self._source.register(event, listener)

    @property
    def state(self) -> ShutdownState:
        return self._state

    @property
    def shutting_down(self) -> bool:
        return self._state is ShutdownState.SHUTTING_DOWN

    @property
    def task(self) -> asyncio.Task[None] | None:
        """The scheduled shutdown task, when one was scheduled onto a running loop."""
        return self._task

    def shutdown(self, cause: str, exit_code: int) -> bool:
        """Start the save-then-exit sequence unless it already started.

        Args:
            cause: Human-readable description, e.g. "terminated (SIGTERM)"
            exit_code: Status passed to the exit function after saving

        Returns:
            True if this call started the sequence, False if a shutdown was
            already in progress.
        """
        # Never block: a signal handler can interrupt this very check on the
        # same thread, and whoever holds the lock is already shutting down
        if not self._state_lock.acquire(blocking=False):
            return False
        try:
            if self._state is ShutdownState.SHUTTING_DOWN:
                return False
            self._state = ShutdownState.SHUTTING_DOWN
        finally:
            self._state_lock.release()

        self._logger.info(f"Process {cause}. Saving progress...", exit_code=exit_code)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._save_and_exit(exit_code))
            return True

        loop.call_soon_threadsafe(self._spawn, exit_code)
        return True

    def close(self) -> None:
        """Unregister all listeners. The state does not go back to ACTIVE."""
        for event, listener in self._listeners.items():
            self._source.unregister(event, listener)

    def _spawn(self, exit_code: int) -> None:
        self._task = asyncio.get_running_loop().create_task(
            self._save_and_exit(exit_code),
            name="catsa-janga-shutdown",
        )

    async def _save_and_exit(self, exit_code: int) -> None:
        try:
            await self._target.save()
        finally:
            self._exit_process(exit_code)

    def _on_interrupt(self, payload: Any) -> None:
        self.shutdown("interrupted (SIGINT)", EXIT_SIGNAL)

    def _on_terminate(self, payload: Any) -> None:
        self.shutdown("terminated (SIGTERM)", EXIT_SIGNAL)

    def _on_uncaught_exception(self, exc: Any) -> None:
        self._logger.error(
            "Uncaught exception",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        self.shutdown("crashed with uncaught exception", EXIT_CRASH)

    def _on_unhandled_rejection(self, exc: Any) -> None:
        self._logger.error(
            "Unhandled asyncio failure",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        self.shutdown("crashed with unhandled asyncio failure", EXIT_CRASH)
