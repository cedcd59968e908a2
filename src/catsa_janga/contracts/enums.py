"""Status codes and event kinds used across component boundaries."""

from enum import StrEnum


class CheckpointState(StrEnum):
    """What a checkpoint path holds at the moment it is inspected.

    Printed by the CLI ``check`` command.
    """

    ABSENT = "absent"
    VALID = "valid"
    CORRUPT = "corrupt"
    UNREADABLE = "unreadable"


class ProcessEvent(StrEnum):
    """Host-process notifications the shutdown coordinator reacts to."""

    INTERRUPT = "interrupt"  # SIGINT
    TERMINATE = "terminate"  # SIGTERM
    UNCAUGHT_EXCEPTION = "uncaught_exception"
    UNHANDLED_REJECTION = "unhandled_rejection"


class ShutdownState(StrEnum):
    """Shutdown coordinator lifecycle.

    The transition ACTIVE -> SHUTTING_DOWN is one-way.
    """

    ACTIVE = "active"
    SHUTTING_DOWN = "shutting_down"
