# src/catsa_janga/engine/signals.py
"""Signal source abstraction for testable shutdown handling.

Process-wide signal and error hooks are global mutable state. Components
never touch them directly; they register listeners on a SignalSource.

Production code uses ProcessSignalSource, which wires the registry to the
real hooks (signal handlers, sys.excepthook, the asyncio exception
handler). Tests use a plain SignalSource and call fire() to simulate
events deterministically.
"""

from __future__ import annotations

import asyncio
import signal
import sys
import threading
from collections.abc import Callable
from types import TracebackType
from typing import Any

from catsa_janga.contracts import ProcessEvent
from catsa_janga.core.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[[Any], object]

_EVENT_SIGNALS: dict[ProcessEvent, signal.Signals] = {
    ProcessEvent.INTERRUPT: signal.SIGINT,
    ProcessEvent.TERMINATE: signal.SIGTERM,
}


class SignalSource:
    """Registry of listeners for host-process events.

    Listeners receive one positional payload: the signal for INTERRUPT and
    TERMINATE, the exception for UNCAUGHT_EXCEPTION and
    UNHANDLED_REJECTION. Listeners run in registration order.

    This base class has no connection to the host process, which makes it
    the fake to inject in tests:

        source = SignalSource()
        coordinator = ShutdownCoordinator(store, signal_source=source, exit_process=exits.append)
        source.fire(ProcessEvent.TERMINATE)
    """

    def __init__(self) -> None:
        self._listeners: dict[ProcessEvent, list[Listener]] = {event: [] for event in ProcessEvent}
        # Re-entrant: fire() may run a listener that unregisters
        self._lock = threading.RLock()

    def register(self, event: ProcessEvent, listener: Listener) -> None:
        """Add a listener for an event."""
        with self._lock:
            first = not self._listeners[event]
            self._listeners[event].append(listener)
            if first:
                self._install(event)

    def unregister(self, event: ProcessEvent, listener: Listener) -> None:
        """Remove a previously registered listener. Unknown listeners are ignored."""
        with self._lock:
            try:
                self._listeners[event].remove(listener)
            except ValueError:
                return
            if not self._listeners[event]:
                self._uninstall(event)

    def listener_count(self, event: ProcessEvent) -> int:
        with self._lock:
            return len(self._listeners[event])

    def fire(self, event: ProcessEvent, payload: Any = None) -> int:
        """Deliver an event to every listener.

        Returns:
            Number of listeners invoked.
        """
        with self._lock:
            listeners = list(self._listeners[event])
        for listener in listeners:
            listener(payload)
        return len(listeners)

    def _install(self, event: ProcessEvent) -> None:
        """Hook called when the first listener for ``event`` registers."""

    def _uninstall(self, event: ProcessEvent) -> None:
        """Hook called when the last listener for ``event`` unregisters."""


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class ProcessSignalSource(SignalSource):
    """SignalSource bound to the real host process.

    Hooks installed on first registration per event, restored on last
    unregistration:

    - INTERRUPT/TERMINATE: ``loop.add_signal_handler`` when registered
      from inside a running event loop, otherwise ``signal.signal``.
      Registration from a non-main thread without a loop is skipped with
      a warning (Python only allows signal handlers on the main thread).
    - UNCAUGHT_EXCEPTION: ``sys.excepthook``. The previous hook runs first
      so the traceback is still printed. An uncaught KeyboardInterrupt is
      delivered as INTERRUPT instead.
    - UNHANDLED_REJECTION: the event loop's exception handler, for
      contexts that carry an exception. The previous (or default) handler
      runs first. When no loop is running at registration time the hook
      is deferred until attach_loop() is called.

    Use get_process_signal_source() for the process-wide instance.
    """

    def __init__(self) -> None:
        super().__init__()
        self._previous_signal_handlers: dict[ProcessEvent, Any] = {}
        self._signal_loops: dict[ProcessEvent, asyncio.AbstractEventLoop] = {}
        self._previous_excepthook: Callable[..., Any] | None = None
        self._exception_loop: asyncio.AbstractEventLoop | None = None
        self._previous_exception_handler: Callable[..., Any] | None = None

    def attach_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Route ``loop``'s unhandled exceptions to UNHANDLED_REJECTION listeners.

        Needed only when listeners registered before the loop started.
        Safe to call repeatedly.
        """
        with self._lock:
            if not self._listeners[ProcessEvent.UNHANDLED_REJECTION]:
                return
            if self._exception_loop is loop:
                return
            self._unhook_loop()
            self._hook_loop(loop)

    def _install(self, event: ProcessEvent) -> None:
        if event in _EVENT_SIGNALS:
            self._install_signal(event)
        elif event is ProcessEvent.UNCAUGHT_EXCEPTION:
            self._previous_excepthook = sys.excepthook
            sys.excepthook = self._excepthook
        else:
            loop = _running_loop()
            # Without a running loop the hook waits for attach_loop()
            if loop is not None:
                self._hook_loop(loop)

    def _uninstall(self, event: ProcessEvent) -> None:
        if event in _EVENT_SIGNALS:
            self._uninstall_signal(event)
        elif event is ProcessEvent.UNCAUGHT_EXCEPTION:
            # Leave alone a hook somebody installed on top of ours
            if sys.excepthook == self._excepthook and self._previous_excepthook is not None:
                sys.excepthook = self._previous_excepthook
            self._previous_excepthook = None
        else:
            self._unhook_loop()

    def _install_signal(self, event: ProcessEvent) -> None:
        sig = _EVENT_SIGNALS[event]
        loop = _running_loop()
        if loop is not None:
            try:
                loop.add_signal_handler(sig, self.fire, event, sig)
            except (NotImplementedError, RuntimeError, ValueError):
                # Windows event loops have no add_signal_handler
                pass
            else:
                self._signal_loops[event] = loop
                return

        try:
            previous = signal.signal(sig, self._handle_signal)
        except ValueError:
            logger.warning(
                "Signal handler not installed outside the main thread",
                signal=sig.name,
            )
            return
        self._previous_signal_handlers[event] = previous if previous is not None else signal.SIG_DFL

    def _uninstall_signal(self, event: ProcessEvent) -> None:
        sig = _EVENT_SIGNALS[event]
        loop = self._signal_loops.pop(event, None)
        if loop is not None:
            if not loop.is_closed():
                loop.remove_signal_handler(sig)
            return
        if event in self._previous_signal_handlers:
            signal.signal(sig, self._previous_signal_handlers.pop(event))

    def _handle_signal(self, signum: int, frame: Any) -> None:
        sig = signal.Signals(signum)
        event = ProcessEvent.INTERRUPT if sig is signal.SIGINT else ProcessEvent.TERMINATE
        self.fire(event, sig)

    def _excepthook(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        if self._previous_excepthook is not None:
            self._previous_excepthook(exc_type, exc, tb)
        if issubclass(exc_type, KeyboardInterrupt):
            self.fire(ProcessEvent.INTERRUPT, signal.SIGINT)
        else:
            self.fire(ProcessEvent.UNCAUGHT_EXCEPTION, exc)

    def _hook_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        self._previous_exception_handler = loop.get_exception_handler()
        loop.set_exception_handler(self._handle_loop_exception)
        self._exception_loop = loop

    def _unhook_loop(self) -> None:
        loop = self._exception_loop
        if loop is not None and not loop.is_closed():
            loop.set_exception_handler(self._previous_exception_handler)
        self._exception_loop = None
        self._previous_exception_handler = None

    def _handle_loop_exception(self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        if self._previous_exception_handler is not None:
            self._previous_exception_handler(loop, context)
        else:
            loop.default_exception_handler(context)
        exc = context.get("exception")
        if exc is not None:
            self.fire(ProcessEvent.UNHANDLED_REJECTION, exc)


_process_source: ProcessSignalSource | None = None
_process_source_lock = threading.Lock()


def get_process_signal_source() -> ProcessSignalSource:
    """Return the process-wide ProcessSignalSource (created on first use)."""
    global _process_source

    with _process_source_lock:
        if _process_source is None:
            _process_source = ProcessSignalSource()
        return _process_source
