"""Shared pytest fixtures and test helpers for chronolinker tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from chronolinker.config.models import EngineConfig
from chronolinker.config.settings import ChronoSettings
from chronolinker.domain.content import parse_frontmatter
from chronolinker.domain.streams import Stream
from chronolinker.infrastructure.store import Document
from chronolinker.infrastructure.vault import Vault

VaultFactory = Callable[..., Vault]


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's CHRONOLINKER_* environment out of the tests."""
    monkeypatch.delenv("CHRONOLINKER_CONFIG", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def vault_root(tmp_path: Path) -> Path:
    """Temporary vault directory with a Journal folder."""
    (tmp_path / "Journal").mkdir()
    return tmp_path


@pytest.fixture
def daily() -> Stream:
    return Stream(id="daily", name="Daily", folder_path="Journal", note_type="day")


@pytest.fixture
def make_vault(vault_root: Path) -> Iterator[VaultFactory]:
    """Build vaults over ``vault_root`` with the given streams.

    Pass ``event_bus=True`` to wire the synchronous plugin event bus.
    """
    opened: list[Vault] = []

    def factory(*streams: Stream, event_bus: bool = False, settle_delay_ms: int = 500) -> Vault:
        settings = ChronoSettings.from_cli(
            vault_root=vault_root,
            streams=streams,
            engine=EngineConfig(settle_delay_ms=settle_delay_ms),
        )
        vault = Vault(settings)
        if event_bus:
            vault.init_event_bus(sync=True)
        opened.append(vault)
        return vault

    try:
        yield factory
    finally:
        for vault in opened:
            vault.close()


@pytest.fixture
def vault(make_vault: VaultFactory, daily: Stream) -> Vault:
    """Vault with a single daily stream over ``Journal/``; no event bus."""
    return make_vault(daily)


@pytest.fixture
def _isolated_vault(vault_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp vault so the CLI discovers its config there."""
    monkeypatch.chdir(vault_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_doc(root: Path, path: str, content: str = "") -> Document:
    """Write a raw markdown file at vault-relative *path*."""
    target = root / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return Document(path)


def read_frontmatter(root: Path, path: str) -> dict[str, Any]:
    """Frontmatter of the file at vault-relative *path*."""
    return parse_frontmatter((root / path).read_text(encoding="utf-8"))[0]


def read_body(root: Path, path: str) -> str:
    return parse_frontmatter((root / path).read_text(encoding="utf-8"))[1]


def write_config(root: Path, text: str) -> Path:
    """Write ``chronolinker.toml`` into *root*."""
    config = root / "chronolinker.toml"
    config.write_text(text, encoding="utf-8")
    return config
