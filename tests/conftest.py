# tests/conftest.py
"""Shared test fixtures and helpers.

Fixtures:
- recording_logger: Logger that captures info/error events for assertions
- signal_source: In-memory SignalSource (no real process hooks)
- exit_codes: List collecting statuses passed to a fake exit function
- restore_logging: Undoes configure_logging() after the test

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from catsa_janga.engine.signals import SignalSource
from tests.helpers.recording_logger import RecordingLogger

# =============================================================================
# Hypothesis Profiles
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # File I/O timing varies on CI machines
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def signal_source() -> SignalSource:
    """Signal source with no connection to the real process."""
    return SignalSource()


@pytest.fixture
def exit_codes() -> list[int]:
    """Pass ``exit_codes.append`` as exit_process to record instead of exiting."""
    return []


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo configure_logging() so later tests don't write to a closed capture."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)
