"""Test configuration shared by all n8ncli tests.

Every test runs with HOME pointing at a temporary directory and without the
N8N_* environment variables, so the real ~/.n8ncli.json and the developer's
shell environment never leak in. Unpatched HTTP calls fail loudly.
"""

from pathlib import Path
from typing import Any

import httpx
import pytest

from n8ncli.auth.store import ConfigStore


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at a temp dir and clear N8N_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.delenv("N8N_HOST", raising=False)
    monkeypatch.delenv("N8N_API_KEY", raising=False)
    return home


@pytest.fixture(autouse=True)
def block_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """Safety net: tests that need HTTP must patch httpx.request themselves."""

    def refuse(*args: Any, **kwargs: Any) -> httpx.Response:
        raise AssertionError(f"Unexpected HTTP call: {args}")

    monkeypatch.setattr("httpx.request", refuse)


@pytest.fixture
def home(isolated_env: Path) -> Path:
    return isolated_env


@pytest.fixture
def store(home: Path) -> ConfigStore:
    return ConfigStore(home=home)
