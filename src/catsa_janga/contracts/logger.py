"""Logger capability used by checkpoint components.

Any object with structlog-style ``info`` and ``error`` methods satisfies
the protocol: a structlog BoundLogger, a test recorder, or NullLogger.
A ``warning`` method may be present but is never required.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CheckpointLogger(Protocol):
    """Minimal logging capability: an event name plus keyword context."""

    def info(self, event: str, *args: Any, **kwargs: Any) -> Any:
        """Record an informational event."""
        ...

    def error(self, event: str, *args: Any, **kwargs: Any) -> Any:
        """Record an error event."""
        ...


class NullLogger:
    """Logger that discards everything."""

    def info(self, event: str, *args: Any, **kwargs: Any) -> None:
        pass

    def warning(self, event: str, *args: Any, **kwargs: Any) -> None:
        pass

    def error(self, event: str, *args: Any, **kwargs: Any) -> None:
        pass
