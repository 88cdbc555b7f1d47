import pytest
from typer.testing import CliRunner
import httpx
import logging
import os
from typing import List

from catfacts.infrastructure.config import settings

class RecordingSleep:
    """Stand-in for asyncio.sleep that records waits instead of sleeping."""

    def __init__(self):
        self.waits: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.waits.append(seconds)

@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()

@pytest.fixture
def recording_sleep():
    return RecordingSleep()

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keeps every test away from the user's config file, .env and CATFACTS_ variables."""
    for key in list(os.environ):
        if key.startswith(settings.ENV_PREFIX):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings, "DEFAULT_CONFIG_FILE", tmp_path / "missing.yaml")
    settings.reset_configuration()
    settings.clear_test_config()
    yield
    settings.reset_configuration()
    settings.clear_test_config()

class FakeCatFactServer:
    """Handler for httpx.MockTransport: serves a canned fact, optionally failing first."""

    def __init__(self, fact: str = "Cats sleep 70% of their lives.", fail_times: int = 0, status_code: int = 503):
        self.fact = fact
        self.fail_times = fail_times
        self.status_code = status_code
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self.requests) <= self.fail_times:
            return httpx.Response(self.status_code, text="unavailable")
        return httpx.Response(200, json={"fact": self.fact, "length": len(self.fact)})

@pytest.fixture
def fake_server():
    return FakeCatFactServer()

@pytest.fixture
def mock_transport(fake_server):
    return httpx.MockTransport(fake_server)

@pytest.fixture
def make_server():
    """Builds FakeCatFactServer instances with custom behaviour."""
    return FakeCatFactServer

@pytest.fixture(autouse=True)
def restore_root_logging():
    """setup_logging() replaces root handlers; put the originals back after each test."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in saved_handlers:
            root.removeHandler(handler)
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_level)
