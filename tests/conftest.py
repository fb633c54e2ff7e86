"""Shared test fixtures for dolphin.

Provides in-memory stand-ins for the transport and cache collaborators,
an isolated config environment, output-state management, and a Typer
CLI runner. These fixtures are discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import pytest

from dolphin.models import DropletDefaults, Envelope
from dolphin.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------


class FakeTransport:
    """Transport that records every call and replays canned envelopes.

    ``responses`` maps a URL to the envelope returned for it; URLs without
    an entry get ``default``.
    """

    def __init__(self, default: Optional[Envelope] = None) -> None:
        self.default = default or Envelope(code=200, body="{}")
        self.responses: dict[str, Envelope] = {}
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, headers: list[str]) -> Envelope:
        self.calls.append({"method": "GET", "url": url, "headers": headers})
        return self.responses.get(url, self.default)

    def post(self, url: str, params: dict[str, Any], headers: list[str]) -> Envelope:
        self.calls.append(
            {"method": "POST", "url": url, "params": params, "headers": headers}
        )
        return self.responses.get(url, self.default)

    def delete(self, url: str, headers: list[str]) -> Envelope:
        self.calls.append({"method": "DELETE", "url": url, "headers": headers})
        return self.responses.get(url, self.default)


class FakeCache:
    """Dict-backed cache where each entry carries an explicit ``fresh`` flag."""

    def __init__(self) -> None:
        self.entries: dict[str, tuple[str, bool]] = {}
        self.reads: list[tuple[str, str]] = []
        self.saves: list[tuple[str, str]] = []

    def put(self, key: str, value: str, fresh: bool = True) -> None:
        self.entries[key] = (value, fresh)

    def get_cached(self, key: str) -> Optional[str]:
        self.reads.append(("any", key))
        entry = self.entries.get(key)
        return entry[0] if entry else None

    def get_cached_unless_expired(self, key: str) -> Optional[str]:
        self.reads.append(("fresh", key))
        entry = self.entries.get(key)
        if entry is None or not entry[1]:
            return None
        return entry[0]

    def save(self, value: str, key: str) -> None:
        self.saves.append((key, value))
        self.entries[key] = (value, True)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def droplet_defaults() -> DropletDefaults:
    return DropletDefaults(
        region="fra1",
        size="s-1vcpu-1gb",
        image="ubuntu-24-04-x64",
        tags=["dolphin"],
        ssh_keys=[101, 102],
    )


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which go stale once CliRunner restores the streams.
    """
    yield
    reset_output()
    logger = logging.getLogger("dolphin")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears the
    token and API URL environment variables, and changes the working
    directory to tmp_path.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("dolphin.config._is_xdg_platform", lambda: True)

    for var in ["DOLPHIN_TOKEN", "DO_API_TOKEN", "DOLPHIN_API_URL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
