# tests/cli/conftest.py
"""Shared fixtures for CLI tests."""

import pytest


@pytest.fixture(autouse=True)
def _isolate_logging(restore_logging: None) -> None:
    """--settings runs configure_logging() against CliRunner's captured stdout."""
