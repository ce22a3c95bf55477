"""Fixtures for CLI command tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from tests.conftest import write_config

DAILY_CONFIG = """\
[[streams]]
id = "daily"
name = "Daily"
folder_path = "Journal"
note_type = "day"
enable_belonging_notes = true
belonging_note_type = "week"
belonging_note_folder = "Weeks"

[[streams]]
id = "monthly"
folder_path = "Months"
note_type = "month"
"""


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Drop the handler the CLI binds to the runner's stderr."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    yield
    root.handlers = original_handlers


@pytest.fixture
def configured_vault(vault_root: Path, _isolated_vault: None) -> Path:
    """Isolated vault with a daily (weekly belonging) and a monthly stream."""
    write_config(vault_root, DAILY_CONFIG)
    return vault_root
