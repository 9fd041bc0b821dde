"""Shared test fixtures for periodo-cli.

Provides isolated settings, fake HTTP transports built on
:class:`httpx.MockTransport`, in-memory token stores, and a Typer CLI
runner. These fixtures are discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from periodo_cli.auth import MemoryTokenStore
from periodo_cli.models import Settings
from periodo_cli.output import reset_output

SERVER = "https://data.example.org/"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch: pytest.MonkeyPatch) -> None:
    """Force colourless output and reset the global OutputManager.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams and the
    test finishes, the cached references become stale. Resetting forces a
    fresh manager on next use.
    """
    monkeypatch.setenv("NO_COLOR", "1")
    for var in ["PERIODO_SERVER", "PERIODO_TOKEN_FILE", "PERIODO_TIMEOUT"]:
        monkeypatch.delenv(var, raising=False)
    reset_output()
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Settings and credentials
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a fake server and a token file under tmp_path."""
    return Settings(server_url=SERVER, token_file=tmp_path / ".periodo-token", timeout=5)


@pytest.fixture
def token_store() -> MemoryTokenStore:
    """A token store that already holds a token."""
    return MemoryTokenStore("secret-token")


# ---------------------------------------------------------------------------
# HTTP fakes
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def make_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], RecordingTransport]:
    """Factory building a :class:`RecordingTransport` from a handler."""
    return RecordingTransport


@pytest.fixture
def respond() -> Callable[..., RecordingTransport]:
    """Factory for a transport that always answers with the same response."""

    def _respond(
        status_code: int,
        headers: dict[str, str] | None = None,
        json: object = None,
        text: str | None = None,
    ) -> RecordingTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if json is not None:
                return httpx.Response(status_code, headers=headers, json=json)
            return httpx.Response(status_code, headers=headers, text=text or "")

        return RecordingTransport(handler)

    return _respond


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
